from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from django.contrib.auth import get_user_model
from friends import store
from friends.models import Friendship
from .models import Organization

User = get_user_model()


class UserAuthTests(APITestCase):
    def setUp(self):
        self.register_url = reverse('users:register')
        self.login_url = reverse('users:token_obtain_pair')
        self.user_data = {
            'username': 'testuser_auth',
            'email': 'Auth@Example.com',
            'password': 'ComplexP@ssw0rd!',
            'password_confirm': 'ComplexP@ssw0rd!'
        }

    def test_user_registration_success(self):
        """
        Ensure new user can be registered.
        """
        response = self.client.post(self.register_url, self.user_data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(User.objects.count(), 1)
        self.assertEqual(User.objects.get().email, 'auth@example.com')
        self.assertIn('access', response.data['tokens'])
        self.assertIn('refresh', response.data['tokens'])
        self.assertEqual(response.data['user']['username'], self.user_data['username'])

    def test_user_registration_passwords_do_not_match(self):
        """
        Ensure registration fails if passwords do not match.
        """
        invalid_data = {**self.user_data, 'password_confirm': 'wrongpassword'}
        response = self.client.post(self.register_url, invalid_data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.data['detail'])

    def test_user_registration_existing_email(self):
        """
        Ensure registration fails if the email exists, whatever its case.
        """
        User.objects.create_user(username='someone', email='auth@example.com', password='ComplexP@ssw0rd!')
        response = self.client.post(self.register_url, self.user_data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data['detail'])

    def test_token_gives_access_to_friendship_api(self):
        """
        A JWT obtained at login authenticates friendship requests.
        """
        self.client.post(self.register_url, self.user_data, format='json')
        friend = User.objects.create_user(username='friend', email='friend@example.com', password='ComplexP@ssw0rd!')

        response = self.client.post(self.login_url, {
            'username': self.user_data['username'],
            'password': self.user_data['password'],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        response = self.client.post(
            reverse('friends:friends-befriend'),
            {'target_type': 'users.user', 'target_id': friend.id},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(store.is_friends_with(friend, User.objects.get(username='testuser_auth')))


class UserProfileTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username='profileuser',
            email='profile@example.com',
            password='password123',
            first_name='Pro',
            last_name='File',
        )
        self.client.force_authenticate(user=self.user)

    def test_me(self):
        response = self.client.get(reverse('users:users-me'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], self.user.id)
        self.assertNotIn('email', response.data)

    def test_list_organizations(self):
        Organization.objects.create(name='Book Club')
        Organization.objects.create(name='Arts Society')

        response = self.client.get(reverse('users:organizations-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([org['name'] for org in response.data], ['Arts Society', 'Book Club'])
        self.assertEqual(response.data[1]['slug'], 'book-club')

    def test_full_name(self):
        self.assertEqual(self.user.full_name, 'Pro File')
        other = User.objects.create_user(username='nameless', email='nameless@example.com', password='x')
        self.assertEqual(other.full_name, 'nameless')

    def test_deleting_organization_removes_its_friendships(self):
        club = Organization.objects.create(name='Chess Club')
        store.befriend(self.user, club)

        club.delete()

        self.assertFalse(Friendship.objects.exists())
