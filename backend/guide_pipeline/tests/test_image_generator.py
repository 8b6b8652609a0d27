"""
Tests for step image generation, storage keys and the sequential strategy.
"""
import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock

from guide_pipeline.errors import AuthenticationFailed, StorageError, UpstreamServiceError
from guide_pipeline.pipelines.image_strategy import SequentialImageStrategy
from guide_pipeline.services.gemini_client import GeminiClient
from guide_pipeline.services.image_generator import (
    PLACEHOLDER_IMAGES,
    StepImageGenerator,
    placeholder_for,
)
from guide_pipeline.services.image_storage import ImageStorage
from guide_pipeline.tests.fixtures import make_config, make_quiz
from guide_pipeline.types import Step, StepImage


def make_step(prompt="sanded chair frame") -> Step:
    return Step(title="Sand", description="Sand everything.", image_prompt=prompt)


class TestPlaceholders(unittest.TestCase):

    def test_placeholder_is_deterministic(self):
        for index in range(12):
            self.assertEqual(placeholder_for(index), PLACEHOLDER_IMAGES[index % len(PLACEHOLDER_IMAGES)])
        self.assertEqual(placeholder_for(5), placeholder_for(0))


class TestStepImageGenerator(unittest.TestCase):

    def setUp(self):
        self.client = MagicMock()
        self.storage = MagicMock()
        self.storage.upload.return_value = "https://cdn.test/guide-images/p1/step-0.png"
        self.generator = StepImageGenerator(self.client, self.storage, make_config())

    def test_primary_model_success(self):
        self.client.generate_image.return_value = (b"img", "image/png")

        image = self.generator.generate_step_image(make_step(), make_quiz(), 0, "p1")

        self.assertFalse(image.is_placeholder)
        self.assertEqual(image.url, "https://cdn.test/guide-images/p1/step-0.png")
        self.assertEqual(image.model, "imagen-3.0-generate-002")
        self.assertEqual(self.client.generate_image.call_count, 1)
        self.storage.upload.assert_called_once_with("p1", 0, b"img", "image/png")

    def test_enhanced_prompt_includes_style_and_furniture(self):
        self.client.generate_image.return_value = (b"img", "image/png")

        self.generator.generate_step_image(make_step(), make_quiz(), 0, "p1")

        prompt = self.client.generate_image.call_args.kwargs["prompt"]
        self.assertIn("sanded chair frame", prompt)
        self.assertIn("Scandinavian", prompt)
        self.assertIn("chair", prompt)
        parameters = self.client.generate_image.call_args.kwargs["parameters"]
        self.assertEqual(parameters["aspect_ratio"], "4:3")
        self.assertEqual(parameters["number_of_images"], 1)
        self.assertNotIn("negative_prompt", parameters)

    def test_negative_prompt_sent_when_configured(self):
        self.client.generate_image.return_value = (b"img", "image/png")
        generator = StepImageGenerator(self.client, self.storage, make_config(image_negative_prompt="text, watermark"))

        generator.generate_step_image(make_step(), make_quiz(), 0, "p1")

        parameters = self.client.generate_image.call_args.kwargs["parameters"]
        self.assertEqual(parameters["negative_prompt"], "text, watermark")

    def test_falls_back_to_second_model(self):
        self.client.generate_image.side_effect = [UpstreamServiceError(), (b"img", "image/png")]

        image = self.generator.generate_step_image(make_step(), make_quiz(), 1, "p1")

        self.assertFalse(image.is_placeholder)
        self.assertEqual(image.model, "imagen-3.0-fast-generate-001")
        models = [c.kwargs["model"] for c in self.client.generate_image.call_args_list]
        self.assertEqual(models, ["imagen-3.0-generate-002", "imagen-3.0-fast-generate-001"])

    def test_unexpected_primary_error_still_tries_fallback(self):
        self.client.generate_image.side_effect = [
            AttributeError("'str' object has no attribute 'get'"),
            (b"img", "image/png"),
        ]

        image = self.generator.generate_step_image(make_step(), make_quiz(), 0, "p1")

        self.assertFalse(image.is_placeholder)
        self.assertEqual(image.model, "imagen-3.0-fast-generate-001")
        self.assertEqual(self.client.generate_image.call_count, 2)

    def test_malformed_primary_response_falls_back(self):
        sdk = MagicMock()
        fallback_image = SimpleNamespace(image_bytes=b"img", mime_type="image/png")
        sdk.models.generate_images.side_effect = [
            SimpleNamespace(generated_images=["oops"]),
            SimpleNamespace(generated_images=[SimpleNamespace(image=fallback_image, rai_filtered_reason=None)]),
        ]
        client = GeminiClient(api_key="test-key", client=sdk)
        generator = StepImageGenerator(client, self.storage, make_config())

        image = generator.generate_step_image(make_step(), make_quiz(), 0, "p1")

        self.assertFalse(image.is_placeholder)
        self.assertEqual(image.model, "imagen-3.0-fast-generate-001")
        models = [c.kwargs["model"] for c in sdk.models.generate_images.call_args_list]
        self.assertEqual(models, ["imagen-3.0-generate-002", "imagen-3.0-fast-generate-001"])
        self.storage.upload.assert_called_once_with("p1", 0, b"img", "image/png")

    def test_unexpected_upload_error_gives_placeholder(self):
        self.client.generate_image.return_value = (b"img", "image/png")
        self.storage.upload.side_effect = RuntimeError("bucket gone")

        image = self.generator.generate_step_image(make_step(), make_quiz(), 2, "p1")

        self.assertTrue(image.is_placeholder)
        self.assertEqual(image.url, placeholder_for(2))

    def test_custom_placeholder_pool(self):
        pool = ("https://img.test/a.png", "https://img.test/b.png")
        generator = StepImageGenerator(self.client, self.storage, make_config(), placeholders=pool)

        self.assertEqual(generator.placeholder(3).url, "https://img.test/b.png")
        self.assertTrue(generator.placeholder(3).is_placeholder)

    def test_both_models_fail_gives_placeholder(self):
        self.client.generate_image.side_effect = [UpstreamServiceError(), AuthenticationFailed()]

        image = self.generator.generate_step_image(make_step(), make_quiz(), 3, "p1")

        self.assertTrue(image.is_placeholder)
        self.assertEqual(image.url, placeholder_for(3))
        self.assertEqual(self.client.generate_image.call_count, 2)
        self.storage.upload.assert_not_called()

    def test_missing_prompt_skips_generation(self):
        image = self.generator.generate_step_image(make_step(prompt=None), make_quiz(), 2, "p1")

        self.assertTrue(image.is_placeholder)
        self.assertEqual(image.url, placeholder_for(2))
        self.client.generate_image.assert_not_called()

    def test_upload_failure_gives_placeholder(self):
        self.client.generate_image.return_value = (b"img", "image/png")
        self.storage.upload.side_effect = StorageError()

        image = self.generator.generate_step_image(make_step(), make_quiz(), 4, "p1")

        self.assertTrue(image.is_placeholder)
        self.assertEqual(image.url, placeholder_for(4))


class TestImageStorage(unittest.TestCase):

    def test_path_layout(self):
        storage = ImageStorage(prefix="guide-images/", storage=MagicMock(), clock=lambda: 1700000000.123)
        self.assertEqual(
            storage.build_path("p1", 2, "image/jpeg"),
            "guide-images/p1/step-2-1700000000123.jpg",
        )

    def test_upload_returns_backend_url(self):
        backend = MagicMock()
        backend.save.return_value = "guide-images/p1/step-0-1000.png"
        backend.url.return_value = "/media/guide-images/p1/step-0-1000.png"
        storage = ImageStorage(storage=backend, clock=lambda: 1.0)

        url = storage.upload("p1", 0, b"bytes")

        self.assertEqual(url, "/media/guide-images/p1/step-0-1000.png")
        self.assertEqual(backend.save.call_args.args[0], "guide-images/p1/step-0-1000.png")

    def test_backend_failure_is_storage_error(self):
        backend = MagicMock()
        backend.save.side_effect = OSError("disk full")
        storage = ImageStorage(storage=backend)

        with self.assertRaises(StorageError):
            storage.upload("p1", 0, b"bytes")


def fallback(index):
    return StepImage(step_index=index, url=placeholder_for(index), is_placeholder=True)


class TestSequentialImageStrategy(unittest.TestCase):

    def test_results_in_step_order(self):
        steps = [make_step(f"prompt {i}") for i in range(3)]
        calls = []

        def generate(step, index):
            calls.append(index)
            return StepImage(step_index=index, url=f"https://img.test/{index}.png")

        images = SequentialImageStrategy().render(steps, generate, fallback)

        self.assertEqual(calls, [0, 1, 2])
        self.assertEqual([image.url for image in images], [f"https://img.test/{i}.png" for i in range(3)])

    def test_unexpected_failure_isolated_to_its_step(self):
        steps = [make_step() for _ in range(3)]

        def generate(step, index):
            if index == 1:
                raise RuntimeError("boom")
            return StepImage(step_index=index, url=f"https://img.test/{index}.png")

        images = SequentialImageStrategy().render(steps, generate, fallback)

        self.assertEqual(images[0].url, "https://img.test/0.png")
        self.assertTrue(images[1].is_placeholder)
        self.assertEqual(images[1].url, placeholder_for(1))
        self.assertEqual(images[2].url, "https://img.test/2.png")

    def test_failed_step_uses_injected_fallback(self):
        steps = [make_step() for _ in range(2)]

        def generate(step, index):
            raise RuntimeError("boom")

        def custom_fallback(index):
            return StepImage(step_index=index, url=f"https://pool.test/{index}.png", is_placeholder=True)

        images = SequentialImageStrategy().render(steps, generate, custom_fallback)

        self.assertEqual([image.url for image in images], ["https://pool.test/0.png", "https://pool.test/1.png"])


if __name__ == '__main__':
    unittest.main()
