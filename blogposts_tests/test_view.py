import json

from django.test import TestCase, override_settings

from .utils import make_blog


@override_settings(BLOGPOSTS_QUERY_ENDPOINT_ENABLED=True)
class QueryProxyViewTest(TestCase):
    def setUp(self):
        self.blog = make_blog()

    def post_query(self, query, params=None):
        return self.client.post(
            "/query/",
            data=json.dumps({"query": query, "params": params or []}),
            content_type="application/json",
        )

    def test_select(self):
        response = self.post_query(
            "SELECT id, slug, published_at FROM posts WHERE slug = %s", ["older-post"]
        )

        self.assertEqual(response.status_code, 200)
        rows = response.json()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["id"], self.blog["older"].pk)
        self.assertEqual(rows[0]["slug"], "older-post")
        self.assertTrue(rows[0]["published_at"].startswith("2024-01-10"))

    def test_select_without_params(self):
        response = self.post_query("SELECT slug FROM posts ORDER BY id")
        self.assertEqual(
            [row["slug"] for row in response.json()],
            ["older-post", "newer-post", "draft"],
        )

    def test_statement_without_result_rows(self):
        response = self.post_query(
            "UPDATE posts SET title = %s WHERE slug = %s", ["Renamed", "draft"]
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])

    def test_sql_error(self):
        with self.assertLogs("blogposts.proxy", level="ERROR"):
            response = self.post_query("SELECT * FROM no_such_table")

        self.assertEqual(response.status_code, 500)
        self.assertIn("no_such_table", response.json()["error"])

    def test_malformed_body(self):
        with self.assertLogs("blogposts.proxy", level="ERROR"):
            response = self.client.post(
                "/query/", data="not json", content_type="application/json"
            )
        self.assertEqual(response.status_code, 500)
        self.assertIn("error", response.json())

    def test_status(self):
        response = self.client.get("/query/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "running")

    def test_cors_preflight(self):
        response = self.client.options("/query/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Access-Control-Allow-Origin"], "*")
        self.assertEqual(response["Access-Control-Allow-Methods"], "GET, POST, OPTIONS")
        self.assertEqual(response["Access-Control-Allow-Headers"], "Content-Type")

    def test_cors_headers_on_results(self):
        response = self.post_query("SELECT 1 AS one")
        self.assertEqual(response["Access-Control-Allow-Origin"], "*")
        self.assertEqual(response.json(), [{"one": 1}])

    @override_settings(BLOGPOSTS_QUERY_ENDPOINT_ENABLED=False)
    def test_disabled(self):
        self.assertEqual(self.client.get("/query/").status_code, 404)
        self.assertEqual(self.post_query("SELECT 1").status_code, 404)
