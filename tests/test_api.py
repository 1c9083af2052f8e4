"""
API tests using FastAPI's TestClient, an in-memory database and a fake OCR service.
"""
from conftest import WORK_PERMIT_TEXT


def image(name, payload):
    return (name, payload, "image/png")


class TestMetaEndpoints:

    def test_health(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_document_types(self, client):
        keys = [item["key"] for item in client.get("/api/document-types").json()]
        assert keys == ["auto", "work_permit", "certification"]


class TestParseAndMerge:

    def test_parse_text(self, client):
        response = client.post("/api/ocr/parse", json={"text": WORK_PERMIT_TEXT, "document_type": "work_permit"})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["document_type"] == "work_permit"
        assert body["flags"]["is_work_permit"] is True
        assert body["extracted"]["fin_number"] == "G6550858W"
        assert body["raw_text"] == WORK_PERMIT_TEXT

    def test_parse_unknown_hint_falls_back_to_auto(self, client):
        body = client.post("/api/ocr/parse", json={"text": "", "document_type": "passport"}).json()
        assert body["document_type"] == "auto"
        assert all(value is None for value in body["extracted"].values())

    def test_parse_empty_text_ignores_hint(self, client):
        body = client.post("/api/ocr/parse", json={"text": "", "document_type": "certification"}).json()
        assert body["document_type"] == "auto"
        assert not any(body["flags"].values())

    def test_merge_order_matters(self, client):
        records = [{"worker_name": "JOHN TAN"}, {"worker_name": "JON TAN", "sex": "M"}]
        merged = client.post("/api/ocr/merge", json={"records": records}).json()["merged"]
        assert merged["worker_name"] == "JOHN TAN"
        assert merged["sex"] == "M"

        merged = client.post("/api/ocr/merge", json={"records": records[::-1]}).json()["merged"]
        assert merged["worker_name"] == "JON TAN"


class TestProcessImages:

    def test_single_image(self, client):
        response = client.post(
            "/api/ocr/process",
            files={"file": image("front.png", b"front")},
            data={"document_type": "work_permit"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["extracted"]["worker_name"] == "JOHN TAN"
        assert body["extracted"]["work_permit_no"] == "034773262"
        assert body["confidence"] == 91.5
        assert body["message"] is None

    def test_blank_image_returns_empty_record(self, client):
        body = client.post("/api/ocr/process", files={"file": image("blank.png", b"blank")}).json()
        assert body["message"] == "No text detected in image"
        assert all(value is None for value in body["extracted"].values())

    def test_non_image_is_rejected(self, client):
        response = client.post("/api/ocr/process", files={"file": ("notes.txt", b"front", "text/plain")})
        assert response.status_code == 400

    def test_recognition_failure_is_bad_gateway(self, client):
        response = client.post("/api/ocr/process", files={"file": image("card.png", b"broken")})
        assert response.status_code == 502

    def test_batch_merges_front_first(self, client):
        response = client.post(
            "/api/ocr/process-batch",
            files=[("files", image("front.png", b"front")), ("files", image("back.png", b"back"))],
            data={"document_type": "work_permit"},
        )
        assert response.status_code == 200
        body = response.json()
        assert [r["filename"] for r in body["results"]] == ["front.png", "back.png"]
        merged = body["merged"]
        assert merged["worker_name"] == "JOHN TAN"
        assert merged["fin_number"] == "G1234567A"
        assert merged["employer_name"] == "ABC MARINE PTE LTD"
        assert merged["date_of_birth"] == "1985-03-02"
        assert merged["wp_expiry_date"] == "2026-12-01"

    def test_batch_limit(self, client):
        files = [("files", image(f"page{i}.png", b"front")) for i in range(5)]
        assert client.post("/api/ocr/process-batch", files=files).status_code == 400


class TestWorkers:

    def test_upsert_is_case_insensitive(self, client):
        first = client.post("/api/workers", json={"fin_number": "g1234567a", "worker_name": "JOHN TAN"})
        assert first.status_code == 200
        assert first.json()["fin_number"] == "G1234567A"

        second = client.post(
            "/api/workers",
            json={"fin_number": "G1234567A", "worker_name": "JOHN TAN", "employer_name": "ABC PTE LTD"},
        )
        assert second.json()["id"] == first.json()["id"]
        assert second.json()["employer_name"] == "ABC PTE LTD"

    def test_fin_and_name_required(self, client):
        assert client.post("/api/workers", json={"worker_name": "JOHN TAN"}).status_code == 400
        assert client.post("/api/workers", json={"fin_number": "G1234567A"}).status_code == 400

    def test_get_worker_with_certifications(self, client):
        client.post("/api/workers", json={"fin_number": "G1234567A", "worker_name": "JOHN TAN"})
        created = client.post(
            "/api/certifications",
            json={"fin_number": "g1234567a", "course_title": "Work-At-Height Rescue Course", "expiry_date": "No Expiry"},
        )
        assert created.status_code == 200

        worker = client.get("/api/workers/g1234567a").json()
        assert worker["worker_name"] == "JOHN TAN"
        assert [c["course_title"] for c in worker["certifications"]] == ["Work-At-Height Rescue Course"]

    def test_unknown_worker(self, client):
        assert client.get("/api/workers/G0000000X").status_code == 404


class TestCertifications:

    def test_course_title_required(self, client):
        response = client.post("/api/certifications", json={"fin_number": "G1234567A"})
        assert response.status_code == 400

    def test_worker_reference_required(self, client):
        response = client.post("/api/certifications", json={"course_title": "Forklift Course"})
        assert response.status_code == 400

    def test_missing_worker(self, client):
        response = client.post("/api/certifications", json={"worker_id": 99, "course_title": "Forklift Course"})
        assert response.status_code == 404

    def test_by_worker_id(self, client):
        worker = client.post("/api/workers", json={"fin_number": "G1234567A", "worker_name": "JOHN TAN"}).json()
        response = client.post("/api/certifications", json={"worker_id": worker["id"], "course_title": "Forklift Course"})
        assert response.status_code == 200
        assert response.json()["worker_id"] == worker["id"]
