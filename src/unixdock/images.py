"""
Docker Images API
"""

import json
import logging
from typing import List, Optional

from .auth import REGISTRY_AUTH_HEADER, AuthHeader
from .exceptions import BuildError
from .models import (
    ImageDeletionInfo,
    ImageDetails,
    ImageHistory,
    ImageSearchResult,
    ImageSummary,
)
from .query import BuildParams, FilterSet, encode_params
from .response import decode_json, decode_text
from .tar_utils import create_build_context

logger = logging.getLogger(__name__)

TAR_CONTENT_TYPE = 'application/x-tar'


def _build_log_error(log: str) -> Optional[str]:
    """Return the first error reported in a JSON-lines build log"""
    for line in log.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            # Plain text output lines
            continue
        if isinstance(data, dict) and 'error' in data:
            detail = data.get('errorDetail')
            if isinstance(detail, dict) and detail.get('message'):
                return str(detail['message'])
            return str(data['error'])
    return None


class ImageCollection:
    """Docker Images collection"""

    def __init__(self, client):
        self.client = client

    def list(self, filters: Optional[FilterSet] = None) -> List[ImageSummary]:
        """
        List images

        Args:
            filters: Filters built with ListImagesFilterBuilder

        Returns:
            List of image summaries
        """
        query = f"filters={filters.encode()}" if filters else None
        response = self.client.http.get('/images/json', query=query)
        return decode_json(response, List[ImageSummary])

    def get(self, name: str) -> ImageDetails:
        """
        Get image by name or ID

        Raises:
            APIError: With status 404 if image not found
        """
        response = self.client.http.get(f'/images/{name}/json')
        return decode_json(response, ImageDetails)

    def history(self, name: str) -> List[ImageHistory]:
        """Get the layer history of an image"""
        response = self.client.http.get(f'/images/{name}/history')
        return decode_json(response, List[ImageHistory])

    def remove(self, name: str, force: bool = False,
               noprune: bool = False) -> List[ImageDeletionInfo]:
        """
        Remove image

        Args:
            name: Image name or ID
            force: Force removal
            noprune: Don't delete untagged parents

        Returns:
            Untagged and deleted references
        """
        query = encode_params({'force': force, 'noprune': noprune})
        response = self.client.http.delete(f'/images/{name}', query=query)
        return decode_json(response, List[ImageDeletionInfo])

    def tag(self, name: str, repo: Optional[str] = None, tag: Optional[str] = None):
        """Tag an image into a repository"""
        query = encode_params({'repo': repo or '', 'tag': tag or ''})
        self.client.http.post(f'/images/{name}/tag', query=query)

    def export(self, name: str, file_path: str):
        """
        Export an image tarball to a file

        The whole tarball is held in memory before it is written.
        """
        response = self.client.http.get(f'/images/{name}/get')
        with open(file_path, 'wb') as f:
            f.write(response.body)
        logger.debug(f"Exported {name} to {file_path} ({len(response.body)} bytes)")

    def load(self, image_path: str) -> str:
        """
        Load images from a tarball produced by export

        Returns:
            Engine progress output
        """
        with open(image_path, 'rb') as f:
            data = f.read()
        response = self.client.http.post(
            '/images/load',
            body=data,
            headers={'Content-Type': TAR_CONTENT_TYPE},
        )
        return decode_text(response)

    def push(self, name: str, server_address: str, tag: Optional[str] = None) -> str:
        """
        Push an image to a registry

        Args:
            name: Image name
            server_address: Registry address
            tag: Tag to push, all tags when omitted

        Returns:
            Engine progress output
        """
        query = encode_params({'tag': tag}) if tag else None
        auth = AuthHeader(serveraddress=server_address)
        response = self.client.http.post(
            f'/images/{name}/push',
            query=query,
            headers={REGISTRY_AUTH_HEADER: auth.encode()},
        )
        return decode_text(response)

    def build(self, path: str, params: Optional[BuildParams] = None) -> str:
        """
        Build image from a context directory

        Args:
            path: Build context path
            params: Parameters built with BuildParamsBuilder

        Returns:
            Build output

        Raises:
            BuildError: If the build output reports an error
        """
        context = create_build_context(path)
        logger.debug(f"Build context {path}: {len(context)} bytes")

        response = self.client.http.post(
            '/build',
            query=params.encode() if params else None,
            body=context,
            headers={'Content-Type': TAR_CONTENT_TYPE},
        )
        log = decode_text(response)

        error = _build_log_error(log)
        if error is not None:
            raise BuildError(f"Build failed: {error}", log=log)
        return log

    def search(self, term: str, limit: Optional[int] = None,
               filters: Optional[FilterSet] = None) -> List[ImageSearchResult]:
        """
        Search images on Docker Hub

        Args:
            term: Search term
            limit: Maximum number of results
            filters: Filters built with SearchImagesFilterBuilder
        """
        params = {'term': term}
        if limit is not None:
            params['limit'] = limit
        query = encode_params(params)
        if filters:
            query = f"{query}&filters={filters.encode()}"

        response = self.client.http.get('/images/search', query=query)
        return decode_json(response, List[ImageSearchResult])
