"""Google Cloud Translation API Basic (v2) engine over plain REST.

Requests are sent with aiohttp and authenticated by the API key in the `key` query
parameter. Every failure leaves this module as a TranslationServiceError whose ErrorKind
is decided here:

- HTTP 429 is RATE_LIMITED, HTTP 5xx is TRANSIENT, any other status of 400 or above is FATAL
- timeouts and connection failures are TRANSIENT
- a response body that cannot be decoded or is not the expected JSON shape is FATAL
- a detection confidence outside [0, 1] (including NaN) is FATAL
"""

from __future__ import annotations

import json
import math
from json import JSONDecodeError
from typing import TYPE_CHECKING, Any, ClassVar

import aiohttp

from core.trans.interface import ErrorKind, TransInterface, TranslationServiceError
from models.config_models import DEFAULT_API_URL
from models.translation_models import DetectionResult
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging

    from models.config_models import Config

__all__: list[str] = ["GoogleV2Translation"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class GoogleV2Translation(TransInterface):
    """Language detection and translation through the Google Translate v2 REST API.

    Attributes:
        api_url (str): Translation endpoint. Detection uses `{api_url}/detect`.
        timeout (float): Total timeout per HTTP request in seconds.
    """

    BODY_PREVIEW_LIMIT: ClassVar[int] = 500

    def __init__(self, session: aiohttp.ClientSession | None = None) -> None:
        super().__init__()
        self.api_url: str = DEFAULT_API_URL
        self.timeout: float = 10.0
        self._api_key: str = ""
        self._available: bool = False
        self.__session: aiohttp.ClientSession | None = session

    @staticmethod
    def fetch_engine_name() -> str:
        return "google_v2"

    @property
    def is_available(self) -> bool:
        return self._available

    @property
    def _session(self) -> aiohttp.ClientSession:
        """Return the current session, creating a new one if none exists or it was closed."""
        if self.__session is None or self.__session.closed:
            self.__session = aiohttp.ClientSession()
        return self.__session

    def initialize(self, config: Config) -> None:
        """Read the endpoint, timeout and API key.

        The engine stays unavailable when no API key is set in `GOOGLE_V2_API_OAUTH`.
        """
        self.api_url = config.TRANSLATION.API_URL.rstrip("/")
        self.timeout = config.TRANSLATION.REQUEST_TIMEOUT
        self._api_key = self.get_authentication_key()
        if not self._api_key:
            logger.warning("'%s': API key is not set, the engine is unavailable", self.engine_name)
            self._available = False
            return
        self._available = True
        logger.info("'%s': initialized with endpoint %s", self.engine_name, self.api_url)

    async def close(self) -> None:
        logger.debug("'%s': 'termination process'", self.__class__.__name__)
        self._available = False
        try:
            if self.__session is not None and not self.__session.closed:
                await self.__session.close()
        finally:
            self.__session = None
            logger.debug("'%s': 'finished'", self.__class__.__name__)

    async def detect_language(self, content: str) -> DetectionResult:
        payload: dict[str, Any] = await self._post(f"{self.api_url}/detect", {"q": content})
        try:
            detection: dict[str, Any] = payload["data"]["detections"][0][0]
            language: str = detection["language"]
            confidence: float = float(detection.get("confidence", 0.0))
        except (KeyError, IndexError, TypeError, ValueError) as err:
            msg: str = f"Unexpected detection response: {self._build_body_preview(str(payload))}"
            raise TranslationServiceError(msg, kind=ErrorKind.FATAL) from err

        if not (math.isfinite(confidence) and 0.0 <= confidence <= 1.0):
            msg = f"Detection confidence out of range: {confidence!r}"
            raise TranslationServiceError(msg, kind=ErrorKind.FATAL)

        logger.debug(
            "Detected language: '%s' => %s (confidence: %.2f)", StringUtils.excerpt(content), language, confidence
        )
        return DetectionResult(language=language, confidence=confidence)

    async def translation(self, content: str, tgt_lang: str, src_lang: str) -> str:
        payload: dict[str, Any] = await self._post(
            self.api_url,
            {"q": content, "source": src_lang, "target": tgt_lang, "format": "text"},
        )
        try:
            translated: str = payload["data"]["translations"][0]["translatedText"]
        except (KeyError, IndexError, TypeError) as err:
            msg: str = f"Unexpected translation response: {self._build_body_preview(str(payload))}"
            raise TranslationServiceError(msg, kind=ErrorKind.FATAL) from err

        if not isinstance(translated, str):
            msg = f"translatedText is not a string: {type(translated).__name__}"
            raise TranslationServiceError(msg, kind=ErrorKind.FATAL)
        return translated

    @classmethod
    def _build_body_preview(cls, body: str) -> str:
        body_preview: str = body.strip().replace("\n", "\\n")
        return StringUtils.excerpt(body_preview, cls.BODY_PREVIEW_LIMIT)

    async def _post(self, url: str, data: dict[str, str]) -> dict[str, Any]:
        """POST a JSON body and return the decoded JSON response.

        Args:
            url (str): Endpoint URL without the key parameter.
            data (dict[str, str]): JSON request body.

        Returns:
            dict[str, Any]: Decoded response body.

        Raises:
            TranslationServiceError: On an error status, a network failure or an undecodable body.
        """
        try:
            _timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with self._session.post(
                url,
                params={"key": self._api_key},
                json=data,
                timeout=_timeout,
            ) as response:
                try:
                    body: str = await response.text()
                except UnicodeDecodeError as err:
                    msg = f"Response body from {url} could not be decoded (HTTP {response.status}): {err}"
                    raise TranslationServiceError(msg, kind=ErrorKind.FATAL, status=response.status) from err
                if response.status >= 400:
                    reason: str = f"{response.status} {response.reason}".strip() if response.reason else ""
                    msg: str = f"HTTP {reason or response.status} from {url}. Body: {self._build_body_preview(body)}"
                    raise TranslationServiceError.from_status(response.status, msg)
        except TimeoutError:
            msg = f"Request to {url} timed out after {self.timeout} sec"
            raise TranslationServiceError(msg, kind=ErrorKind.TRANSIENT) from None
        except ConnectionResetError:
            msg = "connection to host has been disconnected"
            raise TranslationServiceError(msg, kind=ErrorKind.TRANSIENT) from None
        except aiohttp.ClientError as err:
            # Connector failures, disconnects and broken payloads
            raise TranslationServiceError(str(err) or type(err).__name__, kind=ErrorKind.TRANSIENT) from None

        try:
            decoded: Any = json.loads(body)
        except JSONDecodeError as err:
            msg = f"Response is not JSON: {self._build_body_preview(body)}"
            raise TranslationServiceError(msg, kind=ErrorKind.FATAL) from err
        if not isinstance(decoded, dict):
            msg = f"Response is not a JSON object: {self._build_body_preview(body)}"
            raise TranslationServiceError(msg, kind=ErrorKind.FATAL)
        return decoded
