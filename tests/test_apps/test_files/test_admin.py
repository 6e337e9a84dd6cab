"""Tests for files admin."""

from http import HTTPStatus

import pytest
from django.contrib.admin.sites import site
from django.core.exceptions import ValidationError
from django.urls import reverse

from server.apps.files.admin import FileAdmin, FolderAdmin
from server.apps.files.models import File, Folder


@pytest.mark.django_db
def test_file_changelist(admin_client, make_file):
    """Test file changelist shows formatted size and category."""
    make_file(original_name='banner.png', mime_type='image/png', size=1536)

    response = admin_client.get(reverse('admin:files_file_changelist'))

    assert response.status_code == HTTPStatus.OK
    assert b'banner.png' in response.content
    assert b'1.5 KB' in response.content


@pytest.mark.django_db
def test_folder_file_count(rf, folder, make_file):
    """Test folder admin annotates file counts."""
    make_file(folder=folder)
    make_file(folder=folder)
    model_admin = FolderAdmin(Folder, site)

    annotated = model_admin.get_queryset(rf.get('/')).get(id=folder.id)

    assert model_admin.file_count(annotated) == 2


@pytest.mark.django_db
def test_file_size_display(make_file):
    """Test human-readable size column."""
    model_admin = FileAdmin(File, site)

    assert model_admin.size_display(make_file(size=0)) == '0 Bytes'
    assert model_admin.category_display(make_file()) == 'document'


@pytest.mark.django_db
def test_file_form_offers_own_shop_folders_only(
    rf,
    folder,
    foreign_folder,
    make_file,
):
    """Test a file cannot be put into another shop's folder."""
    file_instance = make_file()
    model_admin = FileAdmin(File, site)
    form_class = model_admin.get_form(rf.get('/'), file_instance, change=True)

    foreign_form = form_class(
        data={'original_name': 'moved.txt', 'folder': str(foreign_folder.id)},
        instance=file_instance,
    )
    own_form = form_class(
        data={'original_name': 'moved.txt', 'folder': str(folder.id)},
        instance=file_instance,
    )

    assert not foreign_form.is_valid()
    assert 'folder' in foreign_form.errors
    assert own_form.is_valid()


@pytest.mark.django_db
def test_file_clean_rejects_foreign_folder(foreign_folder, make_file):
    """Test model validation keeps file and folder in one shop."""
    file_instance = make_file()
    file_instance.folder = foreign_folder

    with pytest.raises(ValidationError) as exc_info:
        file_instance.full_clean()

    assert 'folder' in exc_info.value.message_dict


@pytest.mark.django_db
def test_folder_shop_read_only_after_creation(rf, folder):
    """Test an existing folder cannot be moved to another shop."""
    model_admin = FolderAdmin(Folder, site)

    assert 'shop' in model_admin.get_readonly_fields(rf.get('/'), folder)
    assert 'shop' not in model_admin.get_readonly_fields(rf.get('/'))


def test_files_cannot_be_added_in_admin(rf):
    """Test files are created through uploads only."""
    assert not FileAdmin(File, site).has_add_permission(rf.get('/'))
