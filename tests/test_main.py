import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from app.errors import ConfigurationError
from app.main import app, get_llm, get_sessions, translated_filename
from app.sessions import SessionStore, TranslationStatus
from fakes import SOURCE, TRANSLATED, FakeLLM

SRT_MEDIA_TYPE = "application/x-subrip"


class TestTranslatedFilename(unittest.TestCase):
    def test_appends_language_code(self):
        self.assertEqual(translated_filename("movie.srt", "Spanish"), "movie_es.srt")
        self.assertEqual(
            translated_filename("movie.en.srt", "German"), "movie.en_de.srt"
        )

    def test_unknown_language(self):
        self.assertEqual(
            translated_filename("movie.srt", "Klingon"), "movie_translated.srt"
        )


class ApiTestCase(unittest.TestCase):
    llm_response = TRANSLATED
    llm_error = None

    def setUp(self):
        self.sessions = SessionStore()
        self.llm = FakeLLM(self.llm_response, error=self.llm_error)
        app.dependency_overrides[get_sessions] = lambda: self.sessions
        app.dependency_overrides[get_llm] = lambda: self.llm
        self.addCleanup(app.dependency_overrides.clear)
        self.client = TestClient(app)

    def upload(
        self,
        content=SOURCE.encode("utf-8"),
        filename="movie.srt",
        content_type=SRT_MEDIA_TYPE,
        **data,
    ):
        return self.client.post(
            "/sessions",
            files={"file": (filename, content, content_type)},
            data=data,
        )

    def create_session(self, **data):
        response = self.upload(**data)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["id"]

    def translate(self, session_id, **body):
        return self.client.post(f"/sessions/{session_id}/translate", json=body)


class TestUpload(ApiTestCase):
    def test_upload_creates_session(self):
        response = self.upload(target_language="German")

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["filename"], "movie.srt")
        self.assertEqual(body["target_language"], "German")
        self.assertEqual(body["status"], "idle")
        self.assertEqual(body["source_entries"], 2)
        self.assertEqual(body["entries"], [])

    def test_default_target_language(self):
        body = self.upload().json()

        self.assertEqual(body["target_language"], "Spanish")

    def test_rejects_non_srt_file(self):
        response = self.upload(filename="movie.txt", content_type="text/plain")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["detail"], "Invalid file type. Please upload a .srt file."
        )
        self.assertEqual(len(self.sessions), 0)
        self.assertEqual(self.llm.calls, [])

    def test_rejects_empty_file(self):
        response = self.upload(content=b"")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Empty file")

    def test_rejects_large_file(self):
        with patch("app.main.sett.max_file_size_mb", 0):
            response = self.upload()

        self.assertEqual(response.status_code, 400)
        self.assertIn("too large", response.json()["detail"])

    def test_reselecting_file_resets_entries(self):
        session_id = self.create_session()
        self.translate(session_id)

        response = self.client.post(
            f"/sessions/{session_id}/file",
            files={"file": ("other.srt", SOURCE.encode("utf-8"), SRT_MEDIA_TYPE)},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["filename"], "other.srt")
        self.assertEqual(response.json()["entries"], [])

    def test_unknown_session(self):
        self.assertEqual(self.client.get("/sessions/missing").status_code, 404)
        self.assertEqual(self.client.delete("/sessions/missing").status_code, 404)


class TestTranslateAndEdit(ApiTestCase):
    def test_translate_edit_download(self):
        session_id = self.create_session()

        response = self.translate(session_id, target_language="Spanish")
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["status"], "succeeded")
        self.assertEqual([e["text"] for e in body["entries"]], ["Hola", "Mundo"])
        self.assertEqual(self.llm.calls, [(SOURCE, "Spanish")])

        response = self.client.patch(
            f"/sessions/{session_id}/entries/1", json={"text": "Mundo!"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {
                "index": 1,
                "sequence": "2",
                "timing": "00:00:03,000 --> 00:00:04,000",
                "text": "Mundo!",
            },
        )

        response = self.client.get(f"/sessions/{session_id}/download")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.text,
            "1\n00:00:01,000 --> 00:00:02,000\nHola\n\n"
            "2\n00:00:03,000 --> 00:00:04,000\nMundo!\n",
        )
        self.assertIn("movie_es.srt", response.headers["content-disposition"])

    def test_translate_while_requesting_is_rejected(self):
        session_id = self.create_session(target_language="German")
        self.sessions.get(session_id).status = TranslationStatus.REQUESTING

        response = self.translate(session_id, target_language="French")

        self.assertEqual(response.status_code, 409)
        self.assertEqual(self.llm.calls, [])
        self.assertEqual(self.sessions.get(session_id).target_language, "German")

    def test_edit_unknown_entry(self):
        session_id = self.create_session()
        self.translate(session_id)

        response = self.client.patch(
            f"/sessions/{session_id}/entries/9", json={"text": "x"}
        )

        self.assertEqual(response.status_code, 404)

    def test_download_before_translation(self):
        session_id = self.create_session()

        response = self.client.get(f"/sessions/{session_id}/download")

        self.assertEqual(response.status_code, 409)

    def test_delete_session(self):
        session_id = self.create_session()

        response = self.client.delete(f"/sessions/{session_id}")

        self.assertEqual(response.status_code, 200)
        self.assertIsNone(self.sessions.get(session_id))


class TestTranslationFailure(ApiTestCase):
    llm_error = RuntimeError("connection reset by 10.0.0.1")

    def test_translation_error_is_generic(self):
        session_id = self.create_session()

        response = self.translate(session_id)

        self.assertEqual(response.status_code, 502)
        self.assertNotIn("10.0.0.1", response.text)
        session = self.client.get(f"/sessions/{session_id}").json()
        self.assertEqual(session["status"], "failed")
        self.assertEqual(session["error"], response.json()["detail"])


class TestUnparseableTranslation(ApiTestCase):
    llm_response = "I cannot translate this."

    def test_parse_error_is_distinct(self):
        session_id = self.create_session()

        response = self.translate(session_id)

        self.assertEqual(response.status_code, 422)
        self.assertIn("Failed to parse", response.json()["detail"])


class TestLifespan(unittest.TestCase):
    def test_missing_api_key_fails_startup(self):
        with patch("app.main.sett.api_key", ""):
            with self.assertRaises(ConfigurationError):
                with TestClient(app):
                    pass

    def test_startup_builds_client(self):
        with patch("app.main.sett.api_key", "secret"), patch(
            "app.translation.llm.ChatGoogleGenerativeAI"
        ):
            with TestClient(app) as client:
                response = client.get("/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")


if __name__ == "__main__":
    unittest.main()
