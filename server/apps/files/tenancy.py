"""Shop resolution for incoming requests.

Authentication happens in the embedding admin, which forwards the
resolved shop domain in a request header (FILES_SHOP_HEADER). The shop
is passed explicitly to every operation; nothing is stored globally.
"""

import logging

from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.http import HttpRequest

logger = logging.getLogger(__name__)


def resolve_shop(request: HttpRequest) -> str:
    """Return the shop the request acts for.

    Args:
        request: Incoming request.

    Returns:
        Shop identifier.

    Raises:
        PermissionDenied: If the request carries no shop.
    """
    shop = request.META.get(settings.FILES_SHOP_HEADER, '').strip()
    if not shop:
        logger.warning('Request without shop: %s', request.path)
        raise PermissionDenied('Shop could not be resolved')
    return shop
