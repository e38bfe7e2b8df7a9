from django.urls import include, path

urlpatterns = [
    path("query/", include("blogposts.urls")),
]
