"""Hex decoding and HTTP helpers.

The utils layer depends only on [dasync.models][dasync.models] and
third-party libraries. It has no imports from ``dasync.core`` or
``dasync.services``.

Attributes:
    hex: Integer, hex, base64 and signature normalization built on
        ``eth_utils``.
    http: Size-bounded JSON reading of ``aiohttp`` responses.
"""
