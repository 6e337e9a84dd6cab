"""HTTP views of the file manager."""

import logging
from http import HTTPStatus

from django.core.exceptions import ValidationError
from django.http import (
    Http404,
    HttpRequest,
    HttpResponse,
    JsonResponse,
)
from django.utils.http import content_disposition_header
from django.views.decorators.http import require_GET, require_http_methods

from server.apps.files.exceptions import BlobStorageError, NotFoundError
from server.apps.files.infrastructure.metadata import CATEGORY_ALL
from server.apps.files.infrastructure.records import FolderFilter, FolderScope
from server.apps.files.logic.browse import build_listing
from server.apps.files.logic.file_operations import download_file
from server.apps.files.logic.folder_operations import list_folder_files
from server.apps.files.logic.intents import handle_intent
from server.apps.files.serializers import FileSerializer, FolderSerializer
from server.apps.files.tenancy import resolve_shop

logger = logging.getLogger(__name__)


@require_http_methods(['GET', 'POST'])
def file_manager(request: HttpRequest) -> JsonResponse:
    """Listing on GET, intent (upload, delete, move...) on POST."""
    shop = resolve_shop(request)
    if request.method == 'POST':
        result = handle_intent(
            shop,
            request.POST.get('intent'),
            request.POST,
            request.FILES,
        )
        return JsonResponse(result.as_dict(), status=result.status)

    folder = _folder_filter(request.GET.get('folderId'))
    try:
        listing = build_listing(
            shop,
            folder,
            query=request.GET.get('q', ''),
            category=request.GET.get('type', CATEGORY_ALL),
            sort_by=request.GET.get('sort', 'name'),
            sort_order=request.GET.get('order', 'asc'),
        )
    except ValidationError as error:
        return JsonResponse(
            {'success': False, 'error': ' '.join(error.messages)},
            status=HTTPStatus.BAD_REQUEST,
        )

    return JsonResponse({
        'folders': FolderSerializer(listing.folders, many=True).data,
        'files': FileSerializer(listing.files, many=True).data,
        'currentFolderId': request.GET.get('folderId'),
    })


@require_GET
def folder_files(request: HttpRequest, folder_id: str) -> JsonResponse:
    """Files of one folder, newest first."""
    shop = resolve_shop(request)
    try:
        files = list_folder_files(shop, folder_id)
    except NotFoundError as error:
        raise Http404('Folder not found') from error
    return JsonResponse({'files': FileSerializer(files, many=True).data})


@require_GET
def download(request: HttpRequest, file_id: str) -> HttpResponse:
    """Serve file bytes as an attachment.

    Missing records, records of other shops and records whose blob is
    gone all answer 404.
    """
    shop = resolve_shop(request)
    try:
        payload = download_file(shop, file_id)
    except NotFoundError as error:
        raise Http404('File not found') from error
    except BlobStorageError:
        logger.exception('Failed to read file %s for %s', file_id, shop)
        return HttpResponse(
            'File could not be read',
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
        )

    response = HttpResponse(payload.content, content_type=payload.mime_type)
    response['Content-Disposition'] = content_disposition_header(
        as_attachment=True,
        filename=payload.filename,
    )
    response['Content-Length'] = str(payload.size)
    return response


def _folder_filter(folder_id: str | None) -> FolderFilter:
    if not folder_id or folder_id == FolderScope.ROOT.value:
        return FolderScope.ROOT
    if folder_id == FolderScope.ANY.value:
        return FolderScope.ANY
    return folder_id
