# ==============================================================================
# API Error Handling Test Suite
# ==============================================================================

from classbeyond.core.error_handlers import get_json_error_response


class TestErrorResponses:
    def test_default_message(self):
        assert get_json_error_response(404) == {
            "error": {"code": 404, "message": "Not Found", "type": "api_error"}
        }

    def test_detail_overrides_message(self):
        body = get_json_error_response(409, "Already completed")
        assert body["error"]["message"] == "Already completed"

    def test_unknown_route_is_json(self, client):
        response = client.get("/api/v1/nowhere")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == 404

    def test_wrong_method_is_json(self, client):
        response = client.delete("/api/v1/badges")
        assert response.status_code == 405
        assert response.json()["error"]["message"] == "Method Not Allowed"

    def test_validation_error_details(self, client, student):
        response = client.post(
            f"/api/v1/students/{student.id}/quiz-submissions", json={"score": 1}
        )
        assert response.status_code == 422
        error = response.json()["error"]
        assert error["type"] == "validation_error"
        fields = {detail["field"] for detail in error["details"]}
        assert "body -> quiz_id" in fields
