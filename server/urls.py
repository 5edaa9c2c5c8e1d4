"""
Main URL mapping configuration file.

Include other URLConfs from external apps using method `include()`.
Every JSON endpoint lives under `/api/`.
"""

from django.contrib import admin
from django.urls import include, path

admin.site.site_header = 'Cloud Drive'

urlpatterns = [
    # Apps:
    path('api/', include('server.apps.accounts.urls')),
    path('api/', include('server.apps.files.urls')),

    # django-admin:
    path('admin/', admin.site.urls),
]
