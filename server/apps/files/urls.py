from django.urls import path

from server.apps.files import views

app_name = 'files'

urlpatterns = [
    # Storage quota
    path('users/storage', views.storage_summary, name='storage'),

    # Folders
    path('folders', views.folders, name='folders'),
    path('folders/<int:folder_id>', views.folder_detail, name='folder'),
    path(
        'folders/<int:folder_id>/path',
        views.folder_path,
        name='folder_path',
    ),

    # Files
    path('files', views.files, name='files'),
    path('files/upload', views.upload, name='upload'),
    path('files/search', views.search, name='search'),
    path('files/<int:file_id>', views.file_detail, name='file'),
    path('files/<int:file_id>/download', views.download, name='download'),
    path('files/<int:file_id>/preview', views.preview, name='preview'),
]
