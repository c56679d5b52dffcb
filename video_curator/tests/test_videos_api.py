"""
HTTP tests for the video endpoints
"""

import pytest
from uuid import uuid4

from httpx import AsyncClient


class TestListVideos:

    async def test_list_shape(self, client: AsyncClient, test_video):
        response = await client.get("/v1/videos")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["pagination"] == {"total": 1, "page": 1, "totalPages": 1, "hasMore": False}

        video = body["data"][0]
        assert video["_id"] == video["id"] == str(test_video.id)
        assert video["title"] == "Test Video"
        assert video["votes"] == {"upVotes": 0, "downVotes": 0}
        assert video["viewCount"] == 0
        assert set(video) >= {"videoLink", "genre", "contentRating", "releaseDate", "previewImage"}

    async def test_pagination_params(self, client: AsyncClient, make_video):
        older = await make_video(title="Older")
        await make_video(title="Newer")

        response = await client.get("/v1/videos", params={"page": "2", "limit": "1"})

        body = response.json()
        assert [v["id"] for v in body["data"]] == [str(older.id)]
        assert body["pagination"] == {"total": 2, "page": 2, "totalPages": 2, "hasMore": False}

    async def test_garbage_paging_falls_back(self, client: AsyncClient, test_video):
        response = await client.get("/v1/videos", params={"page": "abc", "limit": "-5"})

        assert response.status_code == 200
        assert response.json()["pagination"]["page"] == 1

    async def test_content_rating_filter(self, client: AsyncClient, make_video):
        await make_video(title="Family", content_rating="Anyone")
        await make_video(title="Teen", content_rating="16+")

        response = await client.get("/v1/videos", params={"contentRating": "12+"})

        assert [v["title"] for v in response.json()["data"]] == ["Teen"]

    async def test_unencoded_plus_in_rating(self, client: AsyncClient, make_video):
        await make_video(title="Family", content_rating="Anyone")
        await make_video(title="Teen", content_rating="16+")

        response = await client.get("/v1/videos?contentRating=12+")

        assert [v["title"] for v in response.json()["data"]] == ["Teen"]

    async def test_search_genre_and_sort(self, client: AsyncClient, make_video):
        await make_video(title="Goal of the Season", genre="Sports", view_count=5)
        await make_video(title="Season Recap", genre="Sports", view_count=50)
        await make_video(title="Season Bloopers", genre="Comedy", view_count=500)

        response = await client.get(
            "/v1/videos",
            params={"title": "SEASON", "genres": "Sports", "sortBy": "viewCount"},
        )

        assert [v["title"] for v in response.json()["data"]] == ["Season Recap", "Goal of the Season"]

    async def test_repeated_genre_params(self, client: AsyncClient, make_video):
        await make_video(title="Match", genre="Sports")
        await make_video(title="Standup", genre="Comedy")
        await make_video(title="Lecture", genre="Education")

        response = await client.get("/v1/videos?genres=Sports&genres=Comedy&sortBy=title")

        assert [v["title"] for v in response.json()["data"]] == ["Match", "Standup"]

    @pytest.mark.parametrize("page", ["10000000000000000000", str(2 ** 70)])
    async def test_huge_page_is_an_empty_page(self, client: AsyncClient, test_video, page):
        response = await client.get("/v1/videos", params={"page": page})

        assert response.status_code == 200
        body = response.json()
        assert body["data"] == []
        assert body["pagination"]["total"] == 1
        assert body["pagination"]["hasMore"] is False


class TestGetVideo:

    async def test_get_by_id(self, client: AsyncClient, test_video):
        response = await client.get(f"/v1/videos/{test_video.id}")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == str(test_video.id)

    async def test_not_found(self, client: AsyncClient):
        response = await client.get(f"/v1/videos/{uuid4()}")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Video not found"

    async def test_malformed_id(self, client: AsyncClient):
        response = await client.get("/v1/videos/not-an-id")

        assert response.status_code == 400
        assert response.json()["success"] is False


class TestCreateVideo:

    async def test_create(self, client: AsyncClient, video_payload):
        response = await client.post("/v1/videos", json=video_payload)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Video created successfully"
        assert body["data"]["title"] == "Sample Video"
        assert body["data"]["votes"] == {"upVotes": 0, "downVotes": 0}
        assert body["data"]["viewCount"] == 0

        listed = await client.get("/v1/videos")
        assert listed.json()["pagination"]["total"] == 1

    async def test_invalid_payload(self, client: AsyncClient, video_payload):
        video_payload["genre"] = "Horror"

        response = await client.post("/v1/videos", json=video_payload)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "Genre must be one of" in body["message"]

        listed = await client.get("/v1/videos")
        assert listed.json()["pagination"]["total"] == 0

    @pytest.mark.parametrize("release_date", ["15 Jan 2023", "2023-01-15", "2023-01-15T00:00:00Z"])
    async def test_upload_form_date_formats(self, client: AsyncClient, video_payload, release_date):
        video_payload["releaseDate"] = release_date

        response = await client.post("/v1/videos", json=video_payload)

        assert response.status_code == 201
        assert response.json()["data"]["releaseDate"] == "2023-01-15T00:00:00Z"

    async def test_unparseable_date_names_the_field(self, client: AsyncClient, video_payload):
        video_payload["releaseDate"] = "sometime last year"

        response = await client.post("/v1/videos", json=video_payload)

        assert response.status_code == 400
        assert response.json()["message"].startswith("Release date: ")

    @pytest.mark.parametrize("field, value, message", [
        ("title", "", "Title is required"),
        ("title", "   ", "Title is required"),
        ("genre", None, "Genre is required"),
        ("contentRating", None, "Content rating is required"),
        ("contentRating", "", "Content rating is required"),
        ("releaseDate", None, "Release date is required"),
        ("previewImage", None, "Preview image is required"),
    ])
    async def test_blank_fields_are_required(self, client: AsyncClient, video_payload, field, value, message):
        video_payload[field] = value

        response = await client.post("/v1/videos", json=video_payload)

        assert response.status_code == 400
        assert response.json()["message"] == message


class TestVotes:

    async def test_up_vote(self, client: AsyncClient, test_video):
        response = await client.patch(
            f"/v1/videos/{test_video.id}/votes",
            json={"vote": "upVote", "change": "increase"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Vote updated successfully"
        assert body["data"]["votes"] == {"upVotes": 1, "downVotes": 0}

    async def test_decrease_below_zero(self, client: AsyncClient, test_video):
        response = await client.patch(
            f"/v1/videos/{test_video.id}/votes",
            json={"vote": "downVote", "change": "decrease"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot decrease downVotes below 0"

        fetched = await client.get(f"/v1/videos/{test_video.id}")
        assert fetched.json()["data"]["votes"]["downVotes"] == 0

    async def test_unknown_video(self, client: AsyncClient):
        response = await client.patch(
            f"/v1/videos/{uuid4()}/votes",
            json={"vote": "upVote", "change": "increase"},
        )

        assert response.status_code == 404

    async def test_invalid_vote_body(self, client: AsyncClient, test_video):
        response = await client.patch(
            f"/v1/videos/{test_video.id}/votes",
            json={"vote": "sideways", "change": "increase"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Vote must be one of: upVote, downVote"


class TestViews:

    async def test_each_call_counts(self, client: AsyncClient, test_video):
        for _ in range(3):
            response = await client.patch(f"/v1/videos/{test_video.id}/views")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "View count updated successfully"
        assert body["data"]["viewCount"] == 3

    async def test_unknown_video(self, client: AsyncClient):
        response = await client.patch(f"/v1/videos/{uuid4()}/views")
        assert response.status_code == 404


class TestApplication:

    async def test_unknown_route(self, client: AsyncClient):
        response = await client.get("/v1/nothing-here")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "message": "Route not found",
            "error_type": "HTTPException",
        }

    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert "timestamp" in body
        assert body["uptime"] >= 0

    async def test_security_headers(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "SAMEORIGIN"
        assert "default-src 'self'" in response.headers["Content-Security-Policy"]
        assert "X-Request-ID" in response.headers
