from django.urls import path

from blogposts.views import QueryProxyView

app_name = "blogposts"

urlpatterns = [
    path("", QueryProxyView.as_view(), name="query-proxy"),
]
