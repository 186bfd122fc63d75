"""
Image upload coordination
Issues pre-signed S3 upload URLs and records the image location on the card
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from src.core.config import Settings, settings as default_settings
from src.cards.errors import NotFoundError, ObjectStoreError
from src.cards.store import CardStore, ImageStatus

logger = logging.getLogger(__name__)

IMAGE_EXTENSION = "jpg"
DEFAULT_FILE_TYPE = "image/jpeg"


@dataclass
class UploadSlot:
    """Time-limited upload credential and where the object will live."""
    signed_request: str
    url: str
    image_url: str

    def to_dict(self) -> Dict[str, str]:
        return {"signedRequest": self.signed_request, "url": self.url}


def create_s3_client(config: Settings):
    """Build an S3 client with bounded connect and read timeouts."""
    return boto3.client(
        "s3",
        region_name=config.aws_region,
        aws_access_key_id=config.aws_s3_access_key_id,
        aws_secret_access_key=config.aws_s3_secret_access_key,
        config=Config(
            signature_version=config.aws_s3_signature_version,
            connect_timeout=config.object_store_timeout_seconds,
            read_timeout=config.object_store_timeout_seconds,
            retries={"max_attempts": 0},
        ),
    )


class UploadCoordinator:
    """
    Hands out upload slots for card images.

    The client uploads straight to the bucket. The public image URL is
    written to the card as ``pending`` when the slot is issued and only
    becomes ``confirmed`` once the client patches the card.
    """

    def __init__(
        self,
        store: CardStore,
        s3_client: Optional[Any] = None,
        config: Optional[Settings] = None
    ):
        """
        Initialize coordinator.

        Args:
            store: Card store used to check and update cards
            s3_client: boto3 S3 client (built from settings when omitted)
            config: Settings override
        """
        self.store = store
        self.config = config or default_settings
        self.s3 = s3_client or create_s3_client(self.config)

    def object_key(self, card_id: str) -> str:
        return f"originals/{card_id}.{IMAGE_EXTENSION}"

    def object_url(self, key: str) -> str:
        return (
            f"https://s3.{self.config.aws_region}.amazonaws.com/"
            f"{self.config.image_bucket}/{key}"
        )

    def public_image_url(self, card_id: str) -> str:
        return f"https://{self.config.images_host}/{card_id}.{IMAGE_EXTENSION}"

    def request_upload_slot(self, card_id: str, file_type: str = DEFAULT_FILE_TYPE) -> UploadSlot:
        """
        Issue an upload slot for a card image.

        Repeated requests re-sign the same key and put the image back to
        pending, whether or not the card has been received.

        Raises:
            NotFoundError: card does not exist
            ObjectStoreError: S3 refused to sign the request
        """
        if self.store.by_id(card_id) is None:
            raise NotFoundError(card_id)

        key = self.object_key(card_id)
        try:
            signed_request = self.s3.generate_presigned_url(
                "put_object",
                Params={
                    "Bucket": self.config.image_bucket,
                    "Key": key,
                    "ContentType": file_type,
                },
                ExpiresIn=self.config.image_upload_expires_seconds,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Could not get signed url from S3 for card {card_id}: {e}")
            raise ObjectStoreError(card_id=card_id) from e

        slot = UploadSlot(
            signed_request=signed_request,
            url=self.object_url(key),
            image_url=self.public_image_url(card_id),
        )

        if not self.store.update_report(
            card_id,
            image_url=slot.image_url,
            image_status=ImageStatus.PENDING,
        ):
            raise NotFoundError(card_id)

        logger.debug(f"S3 signed request issued for card {card_id}")
        return slot

    def confirm_image(self, card_id: str, image_url: str) -> None:
        """
        Record the uploaded image as confirmed.

        Raises:
            NotFoundError: card does not exist
        """
        if not self.store.update_report(
            card_id,
            image_url=image_url,
            image_status=ImageStatus.CONFIRMED,
        ):
            raise NotFoundError(card_id)
