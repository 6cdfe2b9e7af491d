"""HTTP tests for publishing and interacting with posts."""

AUDIO = b"\x1aE\xdf\xa3 fake webm bytes"


def _publish(client, title="Harbour", latitude="60.39", longitude="5.32", content=AUDIO, content_type="audio/webm"):
    return client.post(
        "/post/new",
        data={"title": title, "latitude": latitude, "longitude": longitude, "location": "Bergen"},
        files={"audio": ("take.webm", content, content_type)},
        follow_redirects=False,
    )


class TestPublishRoute:
    """Tests for POST /post/new."""

    def test_publish_redirects_to_post(self, client, register):
        register()

        response = _publish(client)

        assert response.status_code == 303
        location = response.headers["location"]
        assert location.startswith("/post/")

        detail = client.get(location).json()
        assert detail["post"]["title"] == "Harbour"
        assert detail["post"]["author"]["username"] == "alice"

        audio = client.get(detail["post"]["audio_url"])
        assert audio.status_code == 200
        assert audio.content == AUDIO
        assert audio.headers["content-type"] == "audio/webm"

    def test_empty_coordinates_accepted(self, client, register):
        register()

        response = _publish(client, latitude="", longitude="")

        assert response.status_code == 303
        assert client.get("/map").json() == []

    def test_unsupported_format(self, client, register):
        register()

        response = _publish(client, content=b"hello", content_type="text/plain")

        assert response.status_code == 400
        assert response.json()["error"] == "Unsupported audio format"

    def test_upload_limit(self, client, register, config):
        """Test that the upload after the hourly quota is refused with 429."""
        register()
        for _ in range(config.upload_max_requests):
            assert _publish(client).status_code == 303

        response = _publish(client)

        assert response.status_code == 429
        body = response.json()
        assert body["type"] == "rate_limit_exceeded"
        assert body["error"].startswith("Upload limit reached")
        assert "reset_at" in body

    def test_requires_login(self, client):
        assert _publish(client).status_code == 401

    def test_long_description_rejected_before_upload(self, client, register, core):
        """Test that an invalid form stores nothing and leaves the upload quota untouched."""
        register()
        user_id = client.get("/me").json()["id"]

        response = client.post(
            "/post/new",
            data={"title": "Harbour", "description": "x" * 2001},
            files={"audio": ("take.webm", AUDIO, "audio/webm")},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Description must be at most 2000 characters"
        assert core.objects._objects == {}
        assert f"rate_limit:upload:{user_id}" not in core.kv._entries

    def test_missing_file(self, client, register):
        register()

        response = client.post("/post/new", data={"title": "Harbour"})

        assert response.status_code == 400
        assert response.json() == {"error": "No audio file was provided", "type": "validation_error"}

    def test_missing_file_after_quota_is_rate_limited(self, client, register, config):
        """Test that the quota check runs before the missing-file check."""
        register()
        for _ in range(config.upload_max_requests):
            assert _publish(client).status_code == 303

        response = client.post("/post/new", data={"title": "Harbour"})

        assert response.status_code == 429
        assert response.json()["type"] == "rate_limit_exceeded"


class TestInteractionRoutes:
    """Tests for likes, comments and follows over HTTP."""

    def test_like_and_comment_redirect_back(self, client, register):
        register()
        post_path = _publish(client).headers["location"]

        liked = client.post(f"{post_path}/like", headers={"Referer": "http://testserver/timeline"}, follow_redirects=False)
        commented = client.post(f"{post_path}/comment", data={"content": " nice "}, follow_redirects=False)

        assert liked.status_code == 303
        assert liked.headers["location"] == "/timeline"
        assert commented.headers["location"] == post_path
        detail = client.get(post_path).json()
        assert detail["is_liked"] is True
        assert detail["post"]["like_count"] == 1
        assert [c["content"] for c in detail["comments"]] == ["nice"]

    def test_blank_comment(self, client, register):
        register()
        post_path = _publish(client).headers["location"]

        response = client.post(f"{post_path}/comment", data={"content": "   "})

        assert response.status_code == 400
        assert response.json()["error"] == "Please enter a comment"

    def test_follow_populates_timeline(self, client, register):
        register("bob")
        _publish(client, title="from bob")
        client.post("/logout")
        register("alice")

        followed = client.post("/profile/bob/follow", follow_redirects=False)

        assert followed.headers["location"] == "/profile/bob"
        assert [p["title"] for p in client.get("/timeline").json()] == ["from bob"]
        profile = client.get("/profile/bob").json()
        assert profile["is_following"] is True
        assert profile["stats"]["followers"] == 1

    def test_follow_self(self, client, register):
        register()

        response = client.post("/profile/alice/follow")

        assert response.status_code == 400
        assert response.json()["type"] == "conflict"

    def test_unknown_post(self, client):
        response = client.get("/post/6f1c1c3e-4b5c-4d1e-9a7b-2f1a3c4d5e6f")

        assert response.status_code == 404
        assert response.json()["type"] == "not_found"

    def test_unknown_audio(self, client):
        assert client.get("/audio/1714564800000-abcd1234.webm").status_code == 404
