"""
Network transport used by the registry clients.

This module provides the two primitives the acquisition engine is built on:

- ``fetch(url) -> bytes`` for registry metadata documents
- ``download_and_extract(url, dest_dir, archive_kind)`` for artifacts

Downloads stream to a temporary file before extraction, so a failed download
never leaves a half-written archive in the destination. There is no retry
logic at this layer; a failed request is reported immediately and retry
policy belongs to the caller.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

import requests
from requests.exceptions import RequestException

from tooldepot.core.exceptions import (
    ArchiveExtractionError,
    DownloadError,
    RegistryFetchError,
    RegistryMetadataError,
)
from tooldepot.core.filesystem import extract_archive, temporary_directory
from tooldepot.core.platform import ArchiveKind

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
CHUNK_SIZE = 8192
USER_AGENT = "tooldepot"


class HttpTransport:
    """
    Blocking HTTP transport backed by requests.

    Example:
        >>> transport = HttpTransport(timeout=10)
        >>> index = transport.fetch_json("https://api.nuget.org/v3/index.json")
    """

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize transport.

        Args:
            timeout: Request timeout in seconds
            headers: Headers sent with every request
        """
        self.timeout = timeout
        self.headers = {"User-Agent": USER_AGENT}
        if headers:
            self.headers.update(headers)

    def _get(self, url: str, stream: bool = False, **kwargs) -> requests.Response:
        headers = dict(self.headers)
        headers.update(kwargs.pop("headers", None) or {})
        response = requests.get(
            url,
            headers=headers,
            timeout=self.timeout,
            stream=stream,
            allow_redirects=True,
            **kwargs,
        )
        response.raise_for_status()
        return response

    def fetch(self, url: str, headers: Optional[Dict[str, str]] = None) -> bytes:
        """
        Fetch a URL and return the response body.

        Raises:
            RegistryFetchError: On transport failure or non-2xx status
        """
        logger.debug(f"GET {url}")
        try:
            response = self._get(url, headers=headers)
        except RequestException as e:
            status = getattr(e.response, "status_code", None)
            raise RegistryFetchError(
                f"Failed to fetch {url}: {e}", url=url, status_code=status
            ) from e
        return response.content

    def fetch_json(self, url: str, headers: Optional[Dict[str, str]] = None) -> Any:
        """
        Fetch a URL and decode the body as JSON.

        Raises:
            RegistryFetchError: On transport failure
            RegistryMetadataError: If the body is not valid JSON
        """
        body = self.fetch(url, headers=headers)
        try:
            return json.loads(body)
        except (ValueError, UnicodeDecodeError) as e:
            raise RegistryMetadataError(
                f"Failed to parse JSON from {url}: {e}", url=url
            ) from e

    def download_file(self, url: str, destination: Path) -> Path:
        """
        Stream a URL to a file.

        Raises:
            DownloadError: If the request fails or the body is empty
        """
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"Downloading from {url}")
        start_time = time.time()
        downloaded = 0

        try:
            response = self._get(url, stream=True)
            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        downloaded += len(chunk)
        except RequestException as e:
            raise DownloadError(f"Failed to download {url}: {e}", url=url) from e
        except OSError as e:
            raise DownloadError(
                f"Failed to write download to {destination}: {e}", url=url
            ) from e

        if downloaded == 0:
            raise DownloadError(f"Download from {url} returned an empty body", url=url)

        logger.info(
            f"Download complete: {downloaded} bytes in {time.time() - start_time:.2f}s"
        )
        return destination

    def download_and_extract(
        self,
        url: str,
        dest_dir: Union[str, Path],
        kind: ArchiveKind,
    ) -> None:
        """
        Download an archive and extract it into a directory.

        Args:
            url: Archive URL
            dest_dir: Extraction destination (created if missing)
            kind: Container format of the archive

        Raises:
            DownloadError: If downloading or extracting fails
        """
        dest_dir = Path(dest_dir)

        with temporary_directory(prefix="tooldepot_dl_") as tmp:
            archive_path = self.download_file(url, tmp / f"artifact.{kind.value}")
            try:
                extract_archive(archive_path, dest_dir, kind)
            except ArchiveExtractionError as e:
                raise DownloadError(
                    f"Failed to extract archive from {url}: {e}", url=url
                ) from e

        logger.debug(f"Extracted {url} into {dest_dir}")
