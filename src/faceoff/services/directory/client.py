"""Character directory clients used to validate new profiles."""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx
import structlog
from lxml import etree
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from faceoff.core.errors import DirectoryLookupError

logger = structlog.get_logger()

UNKNOWN_CHARACTER_ID = "0"


@dataclass(frozen=True)
class CharacterInfo:
    """Public record of a character in the directory."""

    character_id: str
    name: str
    race: str
    bloodline: str


class DirectoryClient(ABC):
    """Abstract base class for async character directory clients."""

    @abstractmethod
    async def lookup_id(self, name: str) -> str | None:
        """Resolve a character name to its directory id.

        Returns:
            The character id, or None if the name is unknown.
        """

    @abstractmethod
    async def character_info(self, character_id: str) -> CharacterInfo | None:
        """Fetch name, race and bloodline for a character id.

        Returns:
            CharacterInfo, or None if the id is unknown.
        """

    async def close(self) -> None:  # noqa: B027
        """Close any resources. Override if needed."""


class FakeDirectoryClient(DirectoryClient):
    """In-memory directory for tests and offline runs.

    Names resolve to a stable id derived from their lowercase form, and race
    and bloodline are drawn from ``roster`` when given, otherwise from a
    fixed table keyed by that id.
    """

    _LINEAGES = (
        ("Caldari", "Deteis"),
        ("Caldari", "Civire"),
        ("Minmatar", "Sebiestor"),
        ("Minmatar", "Brutor"),
        ("Amarr", "Amarr"),
        ("Amarr", "Khanid"),
        ("Gallente", "Intaki"),
        ("Gallente", "Jin-Mei"),
    )

    def __init__(
        self,
        roster: dict[str, tuple[str, str]] | None = None,
        unknown: set[str] | None = None,
    ) -> None:
        """Initialize fake directory.

        Args:
            roster: Optional mapping of character name to (race, bloodline).
            unknown: Names the directory should not know.
        """
        self.roster = {name.lower(): lineage for name, lineage in (roster or {}).items()}
        self.unknown = {name.lower() for name in (unknown or set())}
        self._names: dict[str, str] = {}
        self.call_count = 0

    async def lookup_id(self, name: str) -> str | None:
        self.call_count += 1
        key = name.strip().lower()
        if key in self.unknown:
            return None
        character_id = str(int(hashlib.sha256(key.encode()).hexdigest()[:8], 16) + 90_000_000)
        self._names[character_id] = name.strip()
        return character_id

    async def character_info(self, character_id: str) -> CharacterInfo | None:
        self.call_count += 1
        name = self._names.get(character_id)
        if name is None:
            return None
        lineage = self.roster.get(name.lower())
        if lineage is None:
            lineage = self._LINEAGES[int(character_id) % len(self._LINEAGES)]
        race, bloodline = lineage
        return CharacterInfo(character_id, name, race, bloodline)


def _parse_xml(content: bytes) -> etree._Element:
    """Parse a directory response without resolving entities or fetching DTDs."""
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        return etree.fromstring(content, parser=parser)
    except etree.XMLSyntaxError as e:
        msg = "Character directory returned malformed XML"
        raise DirectoryLookupError(msg) from e


class EveDirectoryClient(DirectoryClient):
    """Async client for the EVE Online XML character directory."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize directory client.

        Args:
            base_url: Directory root, e.g. https://api.eveonline.com/eve.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (tests use a MockTransport).
        """
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def lookup_id(self, name: str) -> str | None:
        root = await self._get("CharacterID.xml.aspx", {"names": name})
        row = root.find("result/rowset/row")
        if row is None:
            return None
        character_id = row.get("characterID", UNKNOWN_CHARACTER_ID)
        if character_id == UNKNOWN_CHARACTER_ID:
            return None
        return character_id

    async def character_info(self, character_id: str) -> CharacterInfo | None:
        root = await self._get("CharacterInfo.xml.aspx", {"characterID": character_id})
        if root.find("error") is not None:
            logger.info("directory_unknown_id", character_id=character_id)
            return None
        result = root.find("result")
        if result is None:
            msg = f"Character directory returned no result for {character_id}"
            raise DirectoryLookupError(msg)
        return CharacterInfo(
            character_id=character_id,
            name=result.findtext("characterName", default="").strip(),
            race=result.findtext("race", default="").strip(),
            bloodline=result.findtext("bloodline", default="").strip(),
        )

    async def _get(self, endpoint: str, params: dict[str, str]) -> etree._Element:
        """Fetch and parse one directory document.

        Raises:
            DirectoryLookupError: On transport failure, HTTP error after
                retries, or malformed XML.
        """
        try:
            content = await self._fetch(endpoint, params)
        except httpx.HTTPError as e:
            msg = f"Character directory request failed: {e}"
            raise DirectoryLookupError(msg) from e
        return _parse_xml(content)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(httpx.HTTPStatusError),
        reraise=True,
    )
    async def _fetch(self, endpoint: str, params: dict[str, str]) -> bytes:
        logger.debug("directory_call", endpoint=endpoint)
        response = await self.client.get(f"{self.base_url}/{endpoint}", params=params)
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close HTTP client."""
        await self.client.aclose()


def create_directory_client(
    base_url: str = "https://api.eveonline.com/eve",
    timeout: float = 10.0,
    dry_run: bool = False,
) -> DirectoryClient:
    """Create appropriate directory client based on settings.

    Args:
        base_url: Directory root URL.
        timeout: Per-request timeout in seconds.
        dry_run: Use the in-memory fake instead of the network.

    Returns:
        DirectoryClient instance.
    """
    if dry_run:
        logger.info("using_fake_directory")
        return FakeDirectoryClient()
    return EveDirectoryClient(base_url, timeout=timeout)
