from unittest.mock import patch
from django.db import IntegrityError, transaction
from django.core.exceptions import ValidationError
from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory, TestCase, TransactionTestCase
from django.urls import reverse
from rest_framework.test import APITestCase
from rest_framework import status
from friendable.permissions import IsFriendable
from users.models import User, Organization
from . import store
from .exceptions import DuplicateRelationship, RelationshipNotFound, SelfRelationship
from .models import Friendship, FriendshipQuerySet, Status
from .refs import EntityRef, pair_key


def make_user(username):
    return User.objects.create_user(
        username=username,
        email=f'{username}@example.com',
        password='password123'
    )


class EntityRefTests(TestCase):
    def setUp(self):
        self.user = make_user('refuser')
        self.org = Organization.objects.create(name='Chess Club')

    def test_ref_of_instance(self):
        ref = EntityRef.of(self.user)
        self.assertEqual(ref.object_id, self.user.pk)
        self.assertEqual(ref.label, 'users.user')
        self.assertEqual(ref.model_class, User)
        self.assertEqual(ref.resolve(), self.user)

    def test_ref_of_ref_is_unchanged(self):
        ref = EntityRef.of(self.org)
        self.assertIs(EntityRef.of(ref), ref)

    def test_from_label(self):
        ref = EntityRef.from_label('users.organization', self.org.pk)
        self.assertEqual(ref, EntityRef.of(self.org))

    def test_from_unknown_label(self):
        with self.assertRaises(LookupError):
            EntityRef.from_label('users.spaceship', 1)

    def test_unsaved_instance_rejected(self):
        with self.assertRaises(ValueError):
            EntityRef.of(User(username='ghost'))

    def test_non_model_rejected(self):
        with self.assertRaises(TypeError):
            EntityRef.of('refuser')

    def test_same_pk_different_types_differ(self):
        org = Organization.objects.create(name='Same Id Org')
        user_ref = EntityRef(EntityRef.of(self.user).content_type_id, org.pk)
        self.assertNotEqual(user_ref, EntityRef.of(org))

    def test_pair_key_is_unordered(self):
        self.assertEqual(pair_key(self.user, self.org), pair_key(self.org, self.user))
        self.assertNotEqual(pair_key(self.user, self.org), pair_key(self.user, make_user('other')))


class FriendshipStoreTests(TestCase):
    def setUp(self):
        """Set up test data"""
        self.alice = make_user('alice')
        self.bob = make_user('bob')
        self.carol = make_user('carol')
        self.dave = make_user('dave')
        self.club = Organization.objects.create(name='Chess Club')

    def test_befriend_creates_pending_friendship(self):
        friendship = store.befriend(self.alice, self.bob)

        self.assertEqual(friendship.status, Status.PENDING)
        self.assertEqual(friendship.sender_ref, EntityRef.of(self.alice))
        self.assertEqual(friendship.recipient_ref, EntityRef.of(self.bob))
        self.assertEqual(friendship.sender, self.alice)
        self.assertEqual(friendship.recipient, self.bob)
        self.assertTrue(store.is_friends_with(self.alice, self.bob))
        self.assertTrue(store.is_friends_with(self.bob, self.alice))
        self.assertEqual(store.get_friendship(self.alice, self.bob).status, Status.PENDING)
        self.assertEqual(store.get_friendship(self.bob, self.alice).pk, friendship.pk)

    def test_befriend_reversed_pair_is_duplicate(self):
        store.befriend(self.alice, self.bob)

        with self.assertRaises(DuplicateRelationship):
            store.befriend(self.bob, self.alice)
        with self.assertRaises(DuplicateRelationship):
            store.befriend(self.alice, self.bob)

        self.assertEqual(Friendship.objects.between(self.alice, self.bob).count(), 1)

    def test_befriend_existing_relationship_in_any_status_is_duplicate(self):
        store.befriend(self.alice, self.bob)
        store.block_friend_request(self.bob, self.alice)

        with self.assertRaises(DuplicateRelationship):
            store.befriend(self.bob, self.alice)
        self.assertTrue(store.has_blocked(self.alice, self.bob))

    def test_cannot_befriend_self(self):
        with self.assertRaises(SelfRelationship):
            store.befriend(self.alice, self.alice)
        self.assertFalse(Friendship.objects.exists())

    def test_concurrent_insert_reported_as_duplicate(self):
        store.befriend(self.alice, self.bob)

        # A racing request passes the first check; the re-check finds the winning row
        with patch.object(FriendshipQuerySet, 'exists', side_effect=[False, True]):
            with self.assertRaises(DuplicateRelationship):
                store.befriend(self.bob, self.alice)

        self.assertEqual(Friendship.objects.between(self.alice, self.bob).count(), 1)

    def test_pair_uniqueness_enforced_by_database(self):
        store.befriend(self.alice, self.bob)
        bob, alice = EntityRef.of(self.bob), EntityRef.of(self.alice)

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Friendship.objects.create(
                    sender_type_id=bob.content_type_id,
                    sender_id=bob.object_id,
                    recipient_type_id=alice.content_type_id,
                    recipient_id=alice.object_id,
                )

    def test_accept_friend_request(self):
        friendship = store.befriend(self.alice, self.bob)
        self.assertEqual(list(store.get_friend_requests(self.bob)), [friendship])
        self.assertEqual(list(store.get_friend_requests(self.alice)), [])

        accepted = store.accept_friend_request(self.bob, self.alice)

        self.assertEqual(accepted.pk, friendship.pk)
        self.assertEqual(accepted.status, Status.ACCEPTED)
        friendship.refresh_from_db()
        self.assertEqual(friendship.status, Status.ACCEPTED)
        self.assertEqual(list(store.get_friend_requests(self.bob)), [])
        self.assertTrue(store.is_friends_with(self.alice, self.bob, Status.ACCEPTED))
        self.assertFalse(store.is_friends_with(self.alice, self.bob, Status.PENDING))

    def test_deny_friend_request(self):
        store.befriend(self.alice, self.bob)
        friendship = store.deny_friend_request(self.bob, self.alice)
        self.assertEqual(friendship.status, Status.DENIED)
        self.assertTrue(store.is_friends_with(self.alice, self.bob, Status.DENIED))

    def test_block_and_unblock(self):
        store.befriend(self.alice, self.bob)
        store.accept_friend_request(self.bob, self.alice)

        self.assertEqual(store.block_friend_request(self.alice, self.bob).status, Status.BLOCKED)
        self.assertEqual(store.unblock_friend_request(self.alice, self.bob).status, Status.PENDING)
        self.assertEqual(store.get_friendship(self.alice, self.bob).status, Status.PENDING)

    def test_transitions_do_not_check_previous_status(self):
        store.befriend(self.alice, self.bob)
        store.block_friend_request(self.bob, self.alice)

        friendship = store.accept_friend_request(self.bob, self.alice)
        self.assertEqual(friendship.status, Status.ACCEPTED)

        friendship = store.deny_friend_request(self.alice, self.bob)
        self.assertEqual(friendship.status, Status.DENIED)

    def test_transitions_preserve_participants(self):
        original = store.befriend(self.alice, self.bob)
        store.accept_friend_request(self.bob, self.alice)
        store.block_friend_request(self.bob, self.alice)

        friendship = store.get_friendship(self.alice, self.bob)
        self.assertEqual(friendship.sender_ref, original.sender_ref)
        self.assertEqual(friendship.recipient_ref, original.recipient_ref)
        self.assertEqual(friendship.pair_key, original.pair_key)

    def test_operations_without_relationship_raise_not_found(self):
        operations = [
            store.accept_friend_request,
            store.deny_friend_request,
            store.block_friend_request,
            store.unblock_friend_request,
            store.unfriend,
        ]
        for operation in operations:
            with self.subTest(operation=operation.__name__):
                with self.assertRaises(RelationshipNotFound):
                    operation(self.alice, self.bob)
        self.assertFalse(Friendship.objects.exists())

    def test_unfriend(self):
        store.befriend(self.alice, self.bob)
        store.accept_friend_request(self.bob, self.alice)

        store.unfriend(self.bob, self.alice)

        self.assertFalse(store.is_friends_with(self.alice, self.bob))
        self.assertIsNone(store.get_friendship(self.alice, self.bob))
        with self.assertRaises(RelationshipNotFound):
            store.unfriend(self.alice, self.bob)

    def test_unfriend_leaves_other_relationships(self):
        store.befriend(self.alice, self.bob)
        store.befriend(self.alice, self.carol)

        store.unfriend(self.alice, self.bob)

        self.assertTrue(store.is_friends_with(self.alice, self.carol))

    def test_is_friends_with_unknown_status(self):
        store.befriend(self.alice, self.bob)
        with self.assertRaises(ValueError):
            store.is_friends_with(self.alice, self.bob, 'frenemies')

    def test_block_direction(self):
        store.befriend(self.alice, self.bob)
        store.block_friend_request(self.bob, self.alice)

        self.assertTrue(store.is_blocked_by(self.alice, self.bob))
        self.assertFalse(store.is_blocked_by(self.bob, self.alice))
        self.assertTrue(store.has_blocked(self.bob, self.alice))
        self.assertTrue(store.has_blocked(self.alice, self.bob))

    def test_block_queries_without_relationship(self):
        self.assertFalse(store.has_blocked(self.alice, self.bob))
        self.assertFalse(store.is_blocked_by(self.alice, self.bob))

    def test_block_queries_when_not_blocked(self):
        store.befriend(self.alice, self.bob)
        self.assertFalse(store.has_blocked(self.alice, self.bob))
        self.assertFalse(store.is_blocked_by(self.alice, self.bob))

    def _build_one_relationship_per_status(self):
        store.befriend(self.alice, self.bob)
        store.befriend(self.alice, self.carol)
        store.accept_friend_request(self.carol, self.alice)
        store.befriend(self.dave, self.alice)
        store.deny_friend_request(self.alice, self.dave)
        store.befriend(self.alice, self.club)
        store.block_friend_request(self.alice, self.club)

    def test_status_lists_return_other_parties(self):
        self._build_one_relationship_per_status()

        self.assertEqual(store.get_pending_friendships(self.alice), [self.bob])
        self.assertEqual(store.get_accepted_friendships(self.alice), [self.carol])
        self.assertEqual(store.get_denied_friendships(self.alice), [self.dave])
        self.assertEqual(store.get_blocked_friendships(self.alice), [self.club])
        self.assertEqual(
            store.get_all_friendships(self.alice),
            [self.bob, self.carol, self.dave, self.club]
        )

    def test_status_lists_are_disjoint(self):
        self._build_one_relationship_per_status()

        lists = {
            status_value: store.FRIENDS_BY_STATUS[status_value](self.alice)
            for status_value in Status.values
        }
        for entity in store.get_all_friendships(self.alice):
            appearances = [s for s, entities in lists.items() if entity in entities]
            self.assertEqual(len(appearances), 1, f"{entity} appears in {appearances}")

    def test_status_lists_from_recipient_side(self):
        self._build_one_relationship_per_status()

        self.assertEqual(store.get_pending_friendships(self.bob), [self.alice])
        self.assertEqual(store.get_denied_friendships(self.dave), [self.alice])
        self.assertEqual(store.get_blocked_friendships(self.club), [self.alice])
        self.assertEqual(store.get_accepted_friendships(self.bob), [])

    def test_pagination(self):
        for other in [self.bob, self.carol, self.dave, self.club]:
            store.befriend(self.alice, other)

        everything = store.get_all_friendships(self.alice)
        self.assertEqual(len(everything), 4)
        self.assertEqual(store.get_all_friendships(self.alice, limit=2, offset=1), everything[1:3])
        self.assertEqual(store.get_all_friendships(self.alice, limit=2), everything[:2])
        self.assertEqual(store.get_all_friendships(self.alice, offset=3), everything[3:])
        self.assertEqual(store.get_pending_friendships(self.alice, limit=10, offset=10), [])
        self.assertEqual(store.get_all_friendships(self.alice, limit=0), [])

    def test_pagination_rejects_negative_values(self):
        with self.assertRaises(ValueError):
            store.get_all_friendships(self.alice, limit=-1)
        with self.assertRaises(ValueError):
            store.get_all_friendships(self.alice, offset=-1)

    def test_status_lists_use_batched_queries(self):
        for other in [self.bob, self.carol, self.dave, self.club]:
            store.befriend(self.alice, other)
        alice = EntityRef.of(self.alice)

        # One query for the friendships, one per entity type
        with self.assertNumQueries(3):
            store.get_all_friendships(alice)

    def test_cross_type_friendship(self):
        store.befriend(self.club, self.alice)
        store.accept_friend_request(self.alice, self.club)

        friends = store.get_accepted_friendships(self.alice)
        self.assertEqual(friends, [self.club])
        self.assertIsInstance(friends[0], Organization)
        self.assertEqual(store.get_accepted_friendships(self.club), [self.alice])

    def test_operations_accept_entity_refs(self):
        club = EntityRef.from_label('users.organization', self.club.pk)
        store.befriend(EntityRef.of(self.alice), club)

        self.assertTrue(store.is_friends_with(self.alice, self.club))
        self.assertEqual(store.get_friend_requests(club).count(), 1)

    def test_deleting_entity_deletes_its_friendships(self):
        store.befriend(self.alice, self.bob)
        store.befriend(self.carol, self.alice)
        store.befriend(self.carol, self.dave)

        self.alice.delete()

        self.assertEqual(Friendship.objects.count(), 1)
        self.assertTrue(store.is_friends_with(self.carol, self.dave))

    def test_related_friendships_on_friendable(self):
        sent = store.befriend(self.alice, self.bob)
        received = store.befriend(self.carol, self.alice)

        self.assertEqual(list(self.alice.sent_friendships.all()), [sent])
        self.assertEqual(list(self.alice.received_friendships.all()), [received])

    def test_get_friendships_returns_rows(self):
        first = store.befriend(self.alice, self.bob)
        second = store.befriend(self.carol, self.alice)
        store.accept_friend_request(self.alice, self.carol)

        self.assertEqual(list(store.get_friendships(self.alice)), [first, second])
        self.assertEqual(list(store.get_friendships(self.alice, Status.ACCEPTED)), [second])

    def test_other_party_ref(self):
        friendship = store.befriend(self.alice, self.bob)
        self.assertEqual(friendship.other_party_ref(self.alice), EntityRef.of(self.bob))
        self.assertEqual(friendship.other_party_ref(self.bob), EntityRef.of(self.alice))
        with self.assertRaises(ValueError):
            friendship.other_party_ref(self.carol)

    def test_model_str_representation(self):
        friendship = store.befriend(self.alice, self.bob)
        alice, bob = EntityRef.of(self.alice), EntityRef.of(self.bob)
        self.assertEqual(str(friendship), f"{alice.key} -> {bob.key} (pending)")

    def test_mutations_are_logged(self):
        with self.assertLogs('friendable', level='INFO') as logs:
            store.befriend(self.alice, self.bob)
            store.accept_friend_request(self.bob, self.alice)
        self.assertTrue(any('Friend request' in line for line in logs.output))
        self.assertTrue(any('pending -> accepted' in line for line in logs.output))


class FriendshipAPITests(APITestCase):
    def setUp(self):
        """Set up test data"""
        self.alice = make_user('alice')
        self.bob = make_user('bob')
        self.carol = make_user('carol')
        self.club = Organization.objects.create(name='Chess Club')

        self.client.force_authenticate(user=self.alice)

        self.list_url = reverse('friends:friends-list')
        self.requests_url = reverse('friends:friends-requests')
        self.relationship_url = reverse('friends:friends-relationship')
        self.befriend_url = reverse('friends:friends-befriend')
        self.accept_url = reverse('friends:friends-accept')
        self.deny_url = reverse('friends:friends-deny')
        self.block_url = reverse('friends:friends-block')
        self.unblock_url = reverse('friends:friends-unblock')
        self.unfriend_url = reverse('friends:friends-unfriend')

    def target(self, entity):
        ref = EntityRef.of(entity)
        return {'target_type': ref.label, 'target_id': ref.object_id}

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_inactive_user_forbidden(self):
        self.alice.is_active = False
        self.alice.save()
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_befriend(self):
        response = self.client.post(self.befriend_url, self.target(self.bob), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], Status.PENDING)
        self.assertEqual(response.data['sender'], {'type': 'users.user', 'id': self.alice.id})
        self.assertEqual(response.data['recipient'], {'type': 'users.user', 'id': self.bob.id})
        self.assertTrue(store.is_friends_with(self.bob, self.alice))

    def test_befriend_organization(self):
        response = self.client.post(self.befriend_url, self.target(self.club), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['recipient'], {'type': 'users.organization', 'id': self.club.id})

    def test_befriend_duplicate_conflicts(self):
        store.befriend(self.bob, self.alice)

        response = self.client.post(self.befriend_url, self.target(self.bob), format='json')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'DuplicateRelationship')
        self.assertEqual(Friendship.objects.count(), 1)

    def test_cannot_befriend_self(self):
        response = self.client.post(self.befriend_url, self.target(self.alice), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'SelfRelationship')

    def test_befriend_invalid_targets(self):
        payloads = [
            {'target_type': 'users.spaceship', 'target_id': 1},
            {'target_type': 'nonsense', 'target_id': 1},
            {'target_type': 'auth.group', 'target_id': 1},
            {'target_type': 'users.user', 'target_id': 99999},
            {'target_type': 'users.user'},
            {'target_id': self.bob.id},
        ]
        for payload in payloads:
            with self.subTest(payload=payload):
                response = self.client.post(self.befriend_url, payload, format='json')
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertEqual(response.data['error'], 'ValidationError')
        self.assertFalse(Friendship.objects.exists())

    def test_accept_request(self):
        store.befriend(self.bob, self.alice)

        response = self.client.post(self.accept_url, self.target(self.bob), format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], Status.ACCEPTED)
        self.assertTrue(store.is_friends_with(self.alice, self.bob, Status.ACCEPTED))

    def test_deny_block_unblock(self):
        store.befriend(self.bob, self.alice)

        for url, expected in [
            (self.deny_url, Status.DENIED),
            (self.block_url, Status.BLOCKED),
            (self.unblock_url, Status.PENDING),
        ]:
            response = self.client.post(url, self.target(self.bob), format='json')
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            self.assertEqual(response.data['status'], expected)

    def test_transition_without_relationship_not_found(self):
        for url in [self.accept_url, self.deny_url, self.block_url, self.unblock_url, self.unfriend_url]:
            with self.subTest(url=url):
                response = self.client.post(url, self.target(self.bob), format='json')
                self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
                self.assertEqual(response.data['error'], 'RelationshipNotFound')

    def test_unfriend(self):
        store.befriend(self.alice, self.bob)

        response = self.client.post(self.unfriend_url, self.target(self.bob), format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], "Friend removed successfully")
        self.assertFalse(store.is_friends_with(self.alice, self.bob))

    def test_list_friends_by_status(self):
        store.befriend(self.alice, self.bob)
        store.befriend(self.carol, self.alice)
        store.accept_friend_request(self.alice, self.carol)
        store.befriend(self.club, self.alice)

        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['status'])
        self.assertEqual(response.data['limit'], 20)
        self.assertEqual(
            [(item['type'], item['id']) for item in response.data['results']],
            [('users.user', self.bob.id), ('users.user', self.carol.id), ('users.organization', self.club.id)]
        )

        response = self.client.get(self.list_url, {'status': Status.ACCEPTED})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['results']), 1)
        self.assertEqual(response.data['results'][0]['id'], self.carol.id)
        self.assertEqual(response.data['results'][0]['name'], 'carol')

    def test_list_pagination(self):
        for other in [self.bob, self.carol, self.club]:
            store.befriend(self.alice, other)

        response = self.client.get(self.list_url, {'limit': 2, 'offset': 1})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['offset'], 1)
        self.assertEqual(
            [item['id'] for item in response.data['results']],
            [self.carol.id, self.club.id]
        )

    def test_list_rejects_bad_parameters(self):
        for params in [{'status': 'frenemies'}, {'limit': 51}, {'limit': -1}, {'offset': 'x'}]:
            with self.subTest(params=params):
                response = self.client.get(self.list_url, params)
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_friend_requests(self):
        incoming = store.befriend(self.bob, self.alice)
        store.befriend(self.alice, self.carol)

        response = self.client.get(self.requests_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data], [incoming.id])
        self.assertEqual(response.data[0]['sender'], {'type': 'users.user', 'id': self.bob.id})

    def test_relationship(self):
        store.befriend(self.alice, self.bob)
        store.block_friend_request(self.bob, self.alice)

        response = self.client.get(self.relationship_url, self.target(self.bob))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_friends'])
        self.assertTrue(response.data['has_blocked'])
        self.assertTrue(response.data['is_blocked_by'])
        self.assertEqual(response.data['friendship']['status'], Status.BLOCKED)

    def test_relationship_without_friendship(self):
        response = self.client.get(self.relationship_url, self.target(self.carol))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['friendship'])
        self.assertFalse(response.data['is_friends'])
        self.assertFalse(response.data['has_blocked'])
        self.assertFalse(response.data['is_blocked_by'])
        self.assertEqual(response.data['target'], {'type': 'users.user', 'id': self.carol.id})

    def test_requests_are_logged(self):
        with self.assertLogs('friendable', level='INFO') as logs:
            self.client.get(self.list_url)
        self.assertTrue(any('Request:' in line for line in logs.output))

    def test_request_log_names_actor_and_target(self):
        with self.assertLogs('friendable', level='INFO') as logs:
            self.client.post(self.befriend_url, self.target(self.club), format='json')

        line = next(line for line in logs.output if 'Request:' in line)
        self.assertIn(f'"actor": "{EntityRef.of(self.alice).key}"', line)
        self.assertIn('"target_type": "users.organization"', line)
        self.assertIn(f'"target_id": {self.club.pk}', line)


class FriendshipIntegrityTests(TransactionTestCase):
    def setUp(self):
        self.alice = make_user('alice')

    def test_dangling_entity_type_is_not_a_duplicate(self):
        ghost = EntityRef(99999, 1)

        with self.assertRaises(IntegrityError):
            store.befriend(self.alice, ghost)

        self.assertFalse(Friendship.objects.exists())


class FriendshipValidationTests(TestCase):
    def setUp(self):
        self.alice = make_user('alice')
        self.bob = make_user('bob')

    def build(self, sender, recipient):
        sender, recipient = EntityRef.of(sender), EntityRef.of(recipient)
        return Friendship(
            sender_type_id=sender.content_type_id,
            sender_id=sender.object_id,
            recipient_type_id=recipient.content_type_id,
            recipient_id=recipient.object_id,
        )

    def test_clean_sets_pair_key(self):
        friendship = self.build(self.alice, self.bob)
        friendship.full_clean()
        self.assertEqual(friendship.pair_key, pair_key(self.alice, self.bob))

    def test_clean_rejects_self_relationship(self):
        with self.assertRaises(ValidationError):
            self.build(self.alice, self.alice).full_clean()

    def test_clean_rejects_reversed_duplicate(self):
        store.befriend(self.alice, self.bob)
        with self.assertRaises(ValidationError):
            self.build(self.bob, self.alice).full_clean()

    def test_clean_accepts_existing_row(self):
        friendship = store.befriend(self.alice, self.bob)
        friendship.status = Status.ACCEPTED
        friendship.full_clean()


class FriendshipAdminTests(TestCase):
    def setUp(self):
        self.admin = User.objects.create_superuser(
            username='admin',
            email='admin@example.com',
            password='password123'
        )
        self.alice = make_user('alice')
        self.bob = make_user('bob')
        self.client.force_login(self.admin)
        self.add_url = reverse('friendable_admin:friends_friendship_add')

    def form_data(self, sender, recipient):
        sender, recipient = EntityRef.of(sender), EntityRef.of(recipient)
        return {
            'sender_type': sender.content_type_id,
            'sender_id': sender.object_id,
            'recipient_type': recipient.content_type_id,
            'recipient_id': recipient.object_id,
            'status': Status.PENDING,
        }

    def test_add_friendship(self):
        response = self.client.post(self.add_url, self.form_data(self.alice, self.bob))

        self.assertEqual(response.status_code, 302)
        friendship = Friendship.objects.get()
        self.assertEqual(friendship.pair_key, pair_key(self.alice, self.bob))

    def test_add_self_relationship_rejected(self):
        response = self.client.post(self.add_url, self.form_data(self.alice, self.alice))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'An entity cannot befriend itself.')
        self.assertFalse(Friendship.objects.exists())

    def test_add_reversed_duplicate_rejected(self):
        store.befriend(self.alice, self.bob)

        response = self.client.post(self.add_url, self.form_data(self.bob, self.alice))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'A friendship between these entities already exists.')
        self.assertEqual(Friendship.objects.count(), 1)


class IsFriendablePermissionTests(TestCase):
    def test_friendable_user_allowed(self):
        request = RequestFactory().get('/')
        request.user = make_user('alice')
        self.assertTrue(IsFriendable().has_permission(request, None))

    def test_other_user_types_rejected(self):
        request = RequestFactory().get('/')
        request.user = AnonymousUser()
        self.assertFalse(IsFriendable().has_permission(request, None))
