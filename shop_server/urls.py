"""
URL configuration for shop_server project.
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/returns/', include('apps.returns.urls')),
    path('api/admin/returns/', include('apps.returns.admin_urls')),
]
