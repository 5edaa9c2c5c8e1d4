"""Tests for folder endpoints."""

from http import HTTPStatus

import pytest
from django.urls import reverse

from server.apps.files.logic.folder_operations import create_folder

_FOLDERS_URL = '/api/folders'


def _folder_url(folder_id):
    return reverse('files:folder', args=[folder_id])


@pytest.mark.django_db
def test_folders_require_authentication(client):
    """Test anonymous requests get 401."""
    response = client.get(_FOLDERS_URL)

    assert response.status_code == HTTPStatus.UNAUTHORIZED
    assert response.json() == {'message': 'Authentication required'}


def test_create_folder(auth_client, user):
    """Test POST creates a root folder."""
    response = auth_client.post(
        _FOLDERS_URL,
        {'name': 'Documents'},
        content_type='application/json',
    )

    assert response.status_code == HTTPStatus.CREATED
    body = response.json()
    assert body['name'] == 'Documents'
    assert body['parent_id'] is None
    assert body['user_id'] == user.id


def test_create_nested_folder(auth_client, user):
    """Test POST with parent_id creates a subfolder."""
    parent = create_folder(user, 'Documents')

    response = auth_client.post(
        _FOLDERS_URL,
        {'name': 'Invoices', 'parent_id': parent.id},
        content_type='application/json',
    )

    assert response.status_code == HTTPStatus.CREATED
    assert response.json()['parent_id'] == parent.id


def test_create_folder_without_name(auth_client):
    """Test name is required."""
    response = auth_client.post(
        _FOLDERS_URL,
        {},
        content_type='application/json',
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.json() == {'message': 'name: This field is required.'}


def test_create_folder_with_invalid_json(auth_client):
    """Test malformed bodies are rejected."""
    response = auth_client.post(
        _FOLDERS_URL,
        '{not json',
        content_type='application/json',
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.json() == {'message': 'Request body must be valid JSON'}


def test_create_folder_with_slash(auth_client):
    """Test folder names cannot contain path separators."""
    response = auth_client.post(
        _FOLDERS_URL,
        {'name': 'a/b'},
        content_type='application/json',
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST


def test_create_folder_in_foreign_parent(auth_client, other_user):
    """Test parent of another user is refused."""
    foreign = create_folder(other_user, 'Private')

    response = auth_client.post(
        _FOLDERS_URL,
        {'name': 'Intruder', 'parent_id': foreign.id},
        content_type='application/json',
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.json() == {'message': 'Invalid parent folder'}


def test_list_folders(auth_client, user, other_user):
    """Test listing without filter returns every folder of the user."""
    docs = create_folder(user, 'Docs')
    create_folder(user, 'Nested', docs.id)
    create_folder(other_user, 'Foreign')

    response = auth_client.get(_FOLDERS_URL)

    assert response.status_code == HTTPStatus.OK
    assert [folder['name'] for folder in response.json()] == [
        'Nested',
        'Docs',
    ]


def test_list_root_and_child_folders(auth_client, user):
    """Test parent_id=root and parent_id=<id> filters."""
    docs = create_folder(user, 'Docs')
    create_folder(user, 'Nested', docs.id)

    root = auth_client.get(_FOLDERS_URL, {'parent_id': 'root'}).json()
    children = auth_client.get(_FOLDERS_URL, {'parent_id': docs.id}).json()

    assert [folder['name'] for folder in root] == ['Docs']
    assert [folder['name'] for folder in children] == ['Nested']


def test_list_folders_with_invalid_filter(auth_client):
    """Test parent_id must be a number or root."""
    response = auth_client.get(_FOLDERS_URL, {'parent_id': 'abc'})

    assert response.status_code == HTTPStatus.BAD_REQUEST


def test_get_folder(auth_client, user):
    """Test reading one folder."""
    folder = create_folder(user, 'Docs')

    response = auth_client.get(_folder_url(folder.id))

    assert response.status_code == HTTPStatus.OK
    assert response.json()['id'] == folder.id


def test_get_missing_folder(auth_client):
    """Test unknown folder gives 404."""
    response = auth_client.get(_folder_url(99999))

    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.json() == {'message': 'Folder not found'}


def test_get_foreign_folder(auth_client, other_user):
    """Test folders of others give 403."""
    foreign = create_folder(other_user, 'Private')

    response = auth_client.get(_folder_url(foreign.id))

    assert response.status_code == HTTPStatus.FORBIDDEN
    assert response.json() == {'message': 'Access denied'}


def test_delete_folder(auth_client, user, mock_s3):
    """Test DELETE removes the folder tree."""
    docs = create_folder(user, 'Docs')
    create_folder(user, 'Nested', docs.id)

    response = auth_client.delete(_folder_url(docs.id))

    assert response.status_code == HTTPStatus.NO_CONTENT
    assert auth_client.get(_FOLDERS_URL).json() == []


def test_delete_foreign_folder(auth_client, other_user, mock_s3):
    """Test folders of others cannot be deleted."""
    foreign = create_folder(other_user, 'Private')

    response = auth_client.delete(_folder_url(foreign.id))

    assert response.status_code == HTTPStatus.FORBIDDEN


def test_folder_path(auth_client, user):
    """Test breadcrumb endpoint."""
    top = create_folder(user, 'Top')
    bottom = create_folder(user, 'Bottom', top.id)

    response = auth_client.get(
        reverse('files:folder_path', args=[bottom.id]),
    )

    assert response.status_code == HTTPStatus.OK
    assert [folder['name'] for folder in response.json()] == [
        'Top',
        'Bottom',
    ]


def test_folder_methods_not_allowed(auth_client, user):
    """Test unsupported methods give 405."""
    folder = create_folder(user, 'Docs')

    response = auth_client.put(_folder_url(folder.id))

    assert response.status_code == HTTPStatus.METHOD_NOT_ALLOWED


def test_folders_with_memory_backend(auth_client, memory_backend):
    """Test API works the same on the in-memory repository."""
    created = auth_client.post(
        _FOLDERS_URL,
        {'name': 'Docs'},
        content_type='application/json',
    ).json()

    listed = auth_client.get(_FOLDERS_URL).json()

    assert listed == [created]
