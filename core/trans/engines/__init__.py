"""Translation engine implementations.

This package contains concrete implementations of the TransInterface. Each engine handles
communication with an external detection/translation API and reports failures as
TranslationServiceError tagged with an ErrorKind.

Modules:
- GoogleV2Translation: Google Cloud Translation API Basic (v2) over REST with aiohttp.
"""

from core.trans.engines.google_v2 import GoogleV2Translation

__all__: list[str] = ["GoogleV2Translation"]
