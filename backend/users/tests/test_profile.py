from django.contrib.auth import get_user_model
from rest_framework.test import APIClient, APITestCase


class ProfileTests(APITestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            username='maker',
            password='pass1234',
            full_name='Mia Maker',
        )

    def _client_for(self, user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    def test_profile_returns_display_fields(self):
        resp = self._client_for(self.user).get('/api/auth/profile/')

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['full_name'], 'Mia Maker')
        self.assertIsNone(resp.data['avatar_url'])

    def test_profile_update(self):
        resp = self._client_for(self.user).patch(
            '/api/auth/profile/',
            {'avatar_url': 'https://img.test/me.png', 'username': 'hacker'},
            format='json',
        )

        self.assertEqual(resp.status_code, 200)
        self.user.refresh_from_db()
        self.assertEqual(self.user.avatar_url, 'https://img.test/me.png')
        self.assertEqual(self.user.username, 'maker')

    def test_token_obtain(self):
        resp = APIClient().post(
            '/api/auth/token/',
            {'username': 'maker', 'password': 'pass1234'},
            format='json',
        )

        self.assertEqual(resp.status_code, 200)
        self.assertIn('access', resp.data)
