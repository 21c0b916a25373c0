from django.contrib import admin
from django.http import HttpResponse
from django.urls import path


def root(request):
    return HttpResponse("Warranty Vault API is running!", content_type="text/plain")


urlpatterns = [
    # ROOT
    path("", root, name="root"),

    # DJANGO ADMIN (STAFF ONLY)
    path("admin/", admin.site.urls),
]
