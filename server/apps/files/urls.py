"""URL routes of the file manager."""

from django.urls import path

from server.apps.files import views

app_name = 'files'

urlpatterns = [
    path('', views.file_manager, name='manager'),
    path(
        'folders/<str:folder_id>/',
        views.folder_files,
        name='folder_files',
    ),
    path('<str:file_id>/download/', views.download, name='download'),
]
