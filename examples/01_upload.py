"""
Upload files to B2
"""
import asyncio
import logging

from b2upload import B2Uploader, UploaderConfig, AuthError


async def main():
    logging.basicConfig(level=logging.INFO)
    
    config = UploaderConfig(
        owner="alice",
        token="keyId:applicationKey",
        bucket="my-images",
        public_url="https://img.example.com"  # optional custom domain
    )
    
    try:
        async with B2Uploader(config) as uploader:
            results = await uploader.upload_files(["photo.jpg", "diagram.png"])
    except AuthError as e:
        print(f"Authorization failed: {e}")
        return
    
    for result in results:
        if result.error:
            print(f"Failed {result.local_path}: {result.error}")
        elif result.skipped:
            print(f"Already uploaded: {result.public_url}")
        else:
            print(f"Uploaded: {result.public_url}")


if __name__ == "__main__":
    asyncio.run(main())
