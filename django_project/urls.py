from django.urls import include, path

urlpatterns = [
    path("api/", include("guidance.api.urls")),
    path("", include("guidance.urls")),
]
