"""
URL configuration for the shower configurator back office.

Every API route lives under /api/; the Django admin is mounted at /admin/.
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve

admin.site.site_header = "Shower Configurator Admin Panel"
admin.site.site_title = "Shower Configurator Admin Portal"
admin.site.index_title = "Catalog, templates and saved designs"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('configurator.core.urls')),
    path('api/', include('configurator.catalog.urls')),
    path('api/', include('configurator.blueprints.urls')),
    path('api/', include('configurator.designs.urls')),
    re_path(r'^static/(?P<path>.*)$', serve, {'document_root': settings.STATIC_ROOT}),
]
