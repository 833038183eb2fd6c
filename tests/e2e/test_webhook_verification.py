"""End-to-end tests for webhook verification."""


class TestWebhookVerification:
    """Test Facebook webhook verification handshake."""

    def test_webhook_verification_success(self, test_client):
        response = test_client.get(
            "/webhook",
            params={
                "hub.mode": "subscribe",
                "hub.verify_token": "test-verify-token",
                "hub.challenge": "challenge-123",
            },
        )

        assert response.status_code == 200
        assert response.text == "challenge-123"
        assert response.headers["content-type"] == "text/plain; charset=utf-8"

    def test_webhook_verification_wrong_token(self, test_client):
        """A wrong token still answers 200, with a fixed body."""
        response = test_client.get(
            "/webhook",
            params={
                "hub.mode": "subscribe",
                "hub.verify_token": "wrong-token",
                "hub.challenge": "challenge-123",
            },
        )

        assert response.status_code == 200
        assert response.text == "Incorrect verify token."

    def test_webhook_verification_ignores_mode(self, test_client):
        response = test_client.get(
            "/webhook",
            params={
                "hub.mode": "unsubscribe",
                "hub.verify_token": "test-verify-token",
                "hub.challenge": "challenge-456",
            },
        )

        assert response.status_code == 200
        assert response.text == "challenge-456"

    def test_webhook_verification_missing_challenge(self, test_client):
        response = test_client.get(
            "/webhook", params={"hub.verify_token": "test-verify-token"}
        )

        assert response.status_code == 200
        assert response.text == ""

    def test_webhook_verification_missing_parameters(self, test_client):
        response = test_client.get("/webhook")

        assert response.status_code == 200
        assert response.text == "Incorrect verify token."

    def test_webhook_verification_does_not_dispatch(
        self, test_client, recording_message_service, recording_messaging_service
    ):
        test_client.get(
            "/webhook",
            params={"hub.verify_token": "test-verify-token", "hub.challenge": "c"},
        )

        assert recording_message_service.requests == []
        assert recording_messaging_service.deliveries == []

    def test_webhook_verification_repeated_token_uses_first_value(self, test_client):
        response = test_client.get(
            "/webhook",
            params=[
                ("hub.verify_token", "wrong-token"),
                ("hub.verify_token", "test-verify-token"),
                ("hub.challenge", "challenge-789"),
            ],
        )

        assert response.status_code == 200
        assert response.text == "Incorrect verify token."

    def test_webhook_verification_repeated_challenge_uses_first_value(
        self, test_client
    ):
        response = test_client.get(
            "/webhook",
            params=[
                ("hub.verify_token", "test-verify-token"),
                ("hub.verify_token", "wrong-token"),
                ("hub.challenge", "first"),
                ("hub.challenge", "second"),
            ],
        )

        assert response.status_code == 200
        assert response.text == "first"
