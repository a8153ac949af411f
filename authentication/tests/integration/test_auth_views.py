from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from authentication.domain.models import PasswordResetCode
from authentication.tasks import purge_expired_reset_codes
from infrastructure.container import container
from marketplace.tests.factories import ClientFactory, FreelancerFactory


STRONG_PASSWORD = "Blue-Otter-Sings-42"


class AuthViewIntegrationTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()

    def test_register_login_and_me(self):
        response = self.client.post(
            reverse("authentication:register"),
            {"name": "Ada", "email": "ada@example.com", "password": STRONG_PASSWORD, "role": "freelancer"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["user"]["role"], "freelancer")

        response = self.client.post(
            reverse("authentication:login"), {"email": "ada@example.com", "password": STRONG_PASSWORD}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        response = self.client.get(reverse("authentication:me"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["email"], "ada@example.com")

    def test_refresh_token(self):
        response = self.client.post(
            reverse("authentication:register"),
            {"name": "Ada", "email": "ada@example.com", "password": STRONG_PASSWORD, "role": "client"},
            format="json",
        )

        response = self.client.post(
            reverse("authentication:token_refresh"), {"refresh": response.data["refresh"]}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.data)

    def test_register_duplicate_email(self):
        ClientFactory(email="ada@example.com")

        response = self.client.post(
            reverse("authentication:register"),
            {"name": "Ada", "email": "ada@example.com", "password": STRONG_PASSWORD, "role": "client"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"], "email_taken")

    def test_login_errors(self):
        user = ClientFactory()

        response = self.client.post(reverse("authentication:login"), {"email": user.email, "password": "nope"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(reverse("authentication:login"), {"email": "x@example.com", "password": "nope"})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_me_requires_token(self):
        response = self.client.get(reverse("authentication:me"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_update_profile(self):
        user = FreelancerFactory()
        self.client.force_authenticate(user=user)

        response = self.client.put(reverse("authentication:profile_update"), {"bio": "Logo designer"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["bio"], "Logo designer")

        response = self.client.put(reverse("authentication:profile_update"), {"email": "x@y.com"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "validation_error")

    def test_profile_picture_upload(self):
        user = ClientFactory()
        self.client.force_authenticate(user=user)

        response = self.client.put(
            reverse("authentication:profile_pic"),
            {"profile_pic": SimpleUploadedFile("me.png", b"png", content_type="image/png")},
            format="multipart",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["profile_pic"])

    def test_delete_account(self):
        user = ClientFactory()
        self.client.force_authenticate(user=user)

        response = self.client.delete(reverse("authentication:account_delete"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["deactivated"])

    def test_freelancer_directory_is_public(self):
        FreelancerFactory(name="Visible")
        ClientFactory()

        response = self.client.get(reverse("authentication:freelancers"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        results = response.data["results"] if isinstance(response.data, dict) else response.data
        self.assertEqual([row["name"] for row in results], ["Visible"])
        self.assertNotIn("email", results[0])

    def test_password_reset_flow(self):
        user = ClientFactory()

        response = self.client.post(reverse("authentication:request_reset"), {"email": user.email}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["email_sent"])

        code = PasswordResetCode.objects.get(email=user.email).code
        response = self.client.post(
            reverse("authentication:verify_otp"),
            {"email": user.email, "otp": code, "new_password": STRONG_PASSWORD},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        user.refresh_from_db()
        self.assertTrue(user.check_password(STRONG_PASSWORD))

    def test_password_reset_mail_failure(self):
        user = ClientFactory()
        container.email().fail_with = "SMTP down"

        response = self.client.post(reverse("authentication:request_reset"), {"email": user.email}, format="json")

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertFalse(response.data["email_sent"])
        self.assertTrue(PasswordResetCode.objects.filter(email=user.email).exists())

    def test_purge_task(self):
        self.assertEqual(purge_expired_reset_codes(), {"deleted": 0})
