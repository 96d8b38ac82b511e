"""
Cloudinary image storage service.
Uploads and deletes catalog images through Cloudinary's HTTP upload API and
builds delivery URLs with on-the-fly transformations.
"""
import hashlib
import logging
import os
import re
import time
from typing import Optional, Dict, Any
from urllib.parse import urlsplit, urlunsplit

import requests
from django.conf import settings

from configurator.core.exceptions import ImageHostError
from configurator.core.models import PlumbingConfig

logger = logging.getLogger(__name__)

CLOUDINARY_API_BASE = 'https://api.cloudinary.com/v1_1'
CLOUDINARY_DELIVERY_HOST = 'res.cloudinary.com'

HORIZONTAL_FLIP = 'a_hflip'

_PUBLIC_ID_PATTERN = re.compile(r'upload/(?:v\d+/)?(.+?)\.(?:jpg|png|jpeg|webp)', re.IGNORECASE)


def _setting(name: str, default: str = '') -> str:
    """Settings take precedence over the environment"""
    return getattr(settings, name, os.getenv(name, default))


def get_cloudinary_config() -> Dict[str, Any]:
    return {
        'cloud_name': _setting('CLOUDINARY_CLOUD_NAME'),
        'api_key': _setting('CLOUDINARY_API_KEY'),
        'api_secret': _setting('CLOUDINARY_API_SECRET'),
        'upload_root': _setting('CLOUDINARY_UPLOAD_ROOT', 'bath-fitter'),
        'timeout': int(_setting('CLOUDINARY_TIMEOUT', '30')),
    }


def is_configured() -> bool:
    config = get_cloudinary_config()
    return bool(config['cloud_name'] and config['api_key'] and config['api_secret'])


def sign_params(params: Dict[str, Any], api_secret: str) -> str:
    """
    Cloudinary request signature: the parameters sorted by name, joined as
    ``key=value`` pairs with ``&``, followed by the API secret, SHA-1 hashed.
    """
    to_sign = '&'.join(
        f"{key}={value}" for key, value in sorted(params.items()) if value not in (None, '')
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode('utf-8')).hexdigest()


def _signed_request(action: str, params: Dict[str, Any], files=None) -> Dict[str, Any]:
    config = get_cloudinary_config()
    if not (config['cloud_name'] and config['api_key'] and config['api_secret']):
        raise ImageHostError('Image storage is not configured')

    payload = dict(params)
    payload['timestamp'] = int(time.time())
    payload['signature'] = sign_params(payload, config['api_secret'])
    payload['api_key'] = config['api_key']

    url = f"{CLOUDINARY_API_BASE}/{config['cloud_name']}/image/{action}"
    try:
        response = requests.post(url, data=payload, files=files, timeout=config['timeout'])
    except requests.exceptions.RequestException as e:
        logger.error(f"Cloudinary {action} request failed: {str(e)}")
        raise ImageHostError(f"Image {action} failed: {str(e)}")

    try:
        body = response.json()
    except ValueError:
        body = {}

    if response.status_code != 200:
        message = (body.get('error') or {}).get('message') or response.text[:200]
        logger.error(f"Cloudinary {action} returned {response.status_code}: {message}")
        raise ImageHostError(f"Image {action} failed: {message}")

    return body


def upload_image(file, folder: str) -> Dict[str, str]:
    """
    Upload an image file into ``<upload_root>/<folder>``.

    Returns:
        dict with ``image_url`` (secure delivery URL) and ``public_id``
    """
    config = get_cloudinary_config()
    target_folder = f"{config['upload_root']}/{folder.strip('/')}"
    file_name = getattr(file, 'name', None) or 'upload'

    if hasattr(file, 'seek'):
        file.seek(0)

    result = _signed_request(
        'upload',
        {'folder': target_folder},
        files={'file': (file_name, file)},
    )

    logger.info(f"Uploaded image to Cloudinary: {result.get('public_id')}")
    return {
        'image_url': result.get('secure_url'),
        'public_id': result.get('public_id'),
    }


def delete_image(public_id: str) -> None:
    """Destroy an uploaded image. A missing image counts as deleted."""
    result = _signed_request('destroy', {'public_id': public_id})
    outcome = result.get('result')
    if outcome not in ('ok', 'not found'):
        raise ImageHostError(f"Failed to delete image: {outcome}")
    logger.info(f"Deleted Cloudinary image {public_id}: {outcome}")


def extract_public_id(url: Optional[str]) -> Optional[str]:
    """Public id of a Cloudinary delivery URL, or None if it is not one"""
    if not url:
        return None
    match = _PUBLIC_ID_PATTERN.search(url)
    return match.group(1) if match else None


def delete_image_by_url(url: Optional[str], public_id: Optional[str] = None) -> bool:
    """
    Best-effort removal of a stored image, used when a record's image is
    replaced or the record is deleted. Failures are logged, never raised.
    """
    public_id = public_id or extract_public_id(url)
    if not public_id:
        return False
    if not is_configured():
        logger.warning(f"Image storage not configured, leaving {public_id} in place")
        return False
    try:
        delete_image(public_id)
        return True
    except ImageHostError as e:
        logger.warning(f"Could not delete image {public_id}: {e.message}")
        return False


def _is_cloudinary_url(url: Optional[str]) -> bool:
    return bool(url) and CLOUDINARY_DELIVERY_HOST in url


def needs_mirroring(variant_config: str, target_config: str) -> bool:
    """LEFT and RIGHT images are mirrors of each other; BOTH fits either side"""
    return {variant_config, target_config} == {PlumbingConfig.LEFT, PlumbingConfig.RIGHT}


def get_plumbing_adjusted_image(image_url: str, variant_config: Optional[str], target_config: str) -> str:
    """
    Delivery URL of a variant image for the target plumbing side.

    Inserts Cloudinary's horizontal flip right after the ``upload`` path
    segment when the image was made for the opposite side. Anything that is
    not a Cloudinary upload URL is returned untouched.
    """
    variant_config = variant_config or PlumbingConfig.LEFT
    if variant_config == target_config or variant_config == PlumbingConfig.BOTH:
        return image_url

    if not _is_cloudinary_url(image_url):
        logger.warning(f"Non-Cloudinary URL detected, not mirroring: {image_url}")
        return image_url

    parts = urlsplit(image_url)
    segments = parts.path.split('/')
    if 'upload' not in segments:
        logger.warning(f"Invalid Cloudinary URL structure: {image_url}")
        return image_url

    if not needs_mirroring(variant_config, target_config):
        return image_url

    upload_index = segments.index('upload')
    segments.insert(upload_index + 1, HORIZONTAL_FLIP)
    return urlunsplit(parts._replace(path='/'.join(segments)))


def get_thumbnail_url(image_url: str, width: int = 200, height: int = 200) -> str:
    """Cropped, auto-format thumbnail of a Cloudinary image"""
    if not _is_cloudinary_url(image_url):
        return image_url
    return image_url.replace('/upload/', f'/upload/w_{width},h_{height},c_fill,q_auto,f_auto/', 1)
