"""
Google Cloud Storage service for temporary document objects
"""

import asyncio
from functools import partial
from typing import List

from google.cloud import storage
from loguru import logger


class StorageService:
    """Service for uploading, reading and deleting objects in one bucket"""

    def __init__(self, client: storage.Client, bucket_name: str):
        self.client = client
        self.bucket_name = bucket_name
        self.bucket = client.bucket(bucket_name)

    def uri(self, key: str) -> str:
        """Return the gs:// URI of an object in this bucket"""
        return f"gs://{self.bucket_name}/{key}"

    async def _run(self, func, *args, **kwargs):
        # The storage SDK is blocking; keep it off the event loop
        return await asyncio.get_running_loop().run_in_executor(None, partial(func, *args, **kwargs))

    async def upload(self, key: str, data: bytes, content_type: str) -> None:
        """Save raw bytes under key with the declared content type"""
        blob = self.bucket.blob(key)
        await self._run(blob.upload_from_string, data, content_type=content_type)
        logger.info(f"Uploaded {len(data)} bytes to {self.uri(key)}")

    async def list_names(self, prefix: str) -> List[str]:
        """List object names under a prefix, in the order the service returns them"""
        def sync_list():
            return [blob.name for blob in self.client.list_blobs(self.bucket_name, prefix=prefix)]

        return await self._run(sync_list)

    async def download(self, name: str) -> bytes:
        blob = self.bucket.blob(name)
        return await self._run(blob.download_as_bytes)

    async def delete(self, name: str) -> None:
        blob = self.bucket.blob(name)
        await self._run(blob.delete)
        logger.debug(f"Deleted {self.uri(name)}")

    async def delete_prefix(self, prefix: str) -> int:
        """
        Delete every object under a prefix.

        A failure on one object is logged and does not stop the others.
        Returns the number of objects deleted.
        """
        names = await self.list_names(prefix)
        results = await asyncio.gather(
            *(self.delete(name) for name in names),
            return_exceptions=True
        )

        deleted = 0
        for name, result in zip(names, results):
            if isinstance(result, Exception):
                logger.warning(f"Could not delete {self.uri(name)}: {result}")
            else:
                deleted += 1
        return deleted
