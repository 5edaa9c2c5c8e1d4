"""Folder, file and storage endpoints of the JSON API."""

from http import HTTPStatus

from django.http import FileResponse, HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.http import (
    require_GET,
    require_http_methods,
    require_POST,
)

from server.apps.accounts.decorators import auth_required
from server.apps.files.forms import FolderForm, UploadForm
from server.apps.files.http import (
    error_response,
    folder_filter_param,
    form_error_message,
    json_body,
)
from server.apps.files.logic import (
    file_operations,
    folder_operations,
    quota_operations,
)
from server.apps.files.serializers import serialize_file, serialize_folder


# Storage

@require_GET
@auth_required
def storage_summary(request: HttpRequest) -> HttpResponse:
    """Report used, total and remaining storage of the current user."""
    return JsonResponse(quota_operations.get_storage_summary(request.user.id))


# Folders

@require_http_methods(['GET', 'POST'])
@auth_required
def folders(request: HttpRequest) -> HttpResponse:
    """List folders (GET) or create one (POST)."""
    if request.method == 'POST':
        form = FolderForm(json_body(request))
        if not form.is_valid():
            return error_response(
                form_error_message(form),
                HTTPStatus.BAD_REQUEST,
            )
        folder = folder_operations.create_folder(
            request.user,
            form.cleaned_data['name'],
            form.cleaned_data['parent_id'],
        )
        return JsonResponse(
            serialize_folder(folder),
            status=HTTPStatus.CREATED,
        )

    parent_id = folder_filter_param(request, 'parent_id')
    folder_list = folder_operations.list_folders(request.user, parent_id)
    return JsonResponse(
        [serialize_folder(folder) for folder in folder_list],
        safe=False,
    )


@require_http_methods(['GET', 'DELETE'])
@auth_required
def folder_detail(request: HttpRequest, folder_id: int) -> HttpResponse:
    """Show a folder (GET) or delete it with its contents (DELETE)."""
    if request.method == 'DELETE':
        folder_operations.delete_folder(request.user, folder_id)
        return HttpResponse(status=HTTPStatus.NO_CONTENT)

    folder = folder_operations.get_folder(request.user, folder_id)
    return JsonResponse(serialize_folder(folder))


@require_GET
@auth_required
def folder_path(request: HttpRequest, folder_id: int) -> HttpResponse:
    """Breadcrumb from the root directory down to the folder."""
    chain = folder_operations.get_folder_path(request.user, folder_id)
    return JsonResponse(
        [serialize_folder(folder) for folder in chain],
        safe=False,
    )


# Files

@require_GET
@auth_required
def files(request: HttpRequest) -> HttpResponse:
    """List the current user's files, optionally inside one folder."""
    folder_id = folder_filter_param(request, 'folder_id')
    file_list = file_operations.list_files(request.user, folder_id)
    return JsonResponse(
        [serialize_file(file_record) for file_record in file_list],
        safe=False,
    )


@require_POST
@auth_required
def upload(request: HttpRequest) -> HttpResponse:
    """Store a multipart ``file`` in the root or in ``folder_id``."""
    form = UploadForm(request.POST, request.FILES)
    if not form.is_valid():
        if 'file' in form.errors:
            return error_response('No file uploaded', HTTPStatus.BAD_REQUEST)
        return error_response(form_error_message(form), HTTPStatus.BAD_REQUEST)

    file_record = file_operations.upload_file(
        request.user,
        form.cleaned_data['file'],
        form.cleaned_data['folder_id'],
    )
    return JsonResponse(
        serialize_file(file_record),
        status=HTTPStatus.CREATED,
    )


@require_GET
@auth_required
def search(request: HttpRequest) -> HttpResponse:
    """Find the current user's files by name or type."""
    file_list = file_operations.search_files(
        request.user,
        request.GET.get('q', ''),
    )
    return JsonResponse(
        [serialize_file(file_record) for file_record in file_list],
        safe=False,
    )


@require_http_methods(['GET', 'DELETE'])
@auth_required
def file_detail(request: HttpRequest, file_id: int) -> HttpResponse:
    """Show file metadata (GET) or delete the file (DELETE)."""
    if request.method == 'DELETE':
        file_operations.delete_file(request.user, file_id)
        return HttpResponse(status=HTTPStatus.NO_CONTENT)

    file_record = file_operations.get_file(request.user, file_id)
    return JsonResponse(serialize_file(file_record))


@require_GET
@auth_required
def download(request: HttpRequest, file_id: int) -> HttpResponse:
    """Send the file as an attachment under its original name."""
    file_record, handle = file_operations.open_file(request.user, file_id)
    return FileResponse(
        handle,
        as_attachment=True,
        filename=file_record.name,
        content_type=file_record.mime_type,
    )


@require_GET
@auth_required
def preview(request: HttpRequest, file_id: int) -> HttpResponse:
    """Send the file for inline display in the browser."""
    file_record, handle = file_operations.open_preview(request.user, file_id)
    response = FileResponse(
        handle,
        filename=file_record.name,
        content_type=file_record.mime_type,
    )
    # Uploaded content never runs with the app's origin
    response['Content-Security-Policy'] = 'sandbox'
    return response
