#!/usr/bin/env python
"""
Script to generate sample data for Friendable development.
This creates users, organizations, and friendships in every status.

Usage:
    python manage.py shell -c "exec(open('scripts/generate_sample_data.py').read())"
"""

import random

from users.models import User, Organization
from friends import store
from friends.exceptions import DuplicateRelationship
from friends.models import Friendship, Status

# Configuration
NUM_USERS = 10
NUM_FRIEND_CONNECTIONS = 20

ORGANIZATIONS = ['Chess Club', 'Hiking Society', 'Book Circle']

TRANSITIONS = {
    Status.PENDING: None,
    Status.ACCEPTED: store.accept_friend_request,
    Status.DENIED: store.deny_friend_request,
    Status.BLOCKED: store.block_friend_request,
}

print("Starting sample data generation for Friendable...")

admin_user, created = User.objects.get_or_create(
    username="friendable",
    defaults={
        "email": "admin@friendable.local",
        "is_staff": True,
        "is_superuser": True,
    }
)
if created:
    admin_user.set_password("friendable")
    admin_user.save()
    print("Created admin user: friendable")
else:
    print("Admin user already exists")

print(f"Creating {NUM_USERS} sample users...")
entities = [admin_user]
for i in range(1, NUM_USERS + 1):
    user, created = User.objects.get_or_create(
        username=f"user{i}",
        defaults={"email": f"user{i}@example.com"}
    )
    if created:
        user.set_password("password123")
        user.save()
    entities.append(user)

print(f"Creating {len(ORGANIZATIONS)} organizations...")
for name in ORGANIZATIONS:
    organization, _ = Organization.objects.get_or_create(name=name)
    entities.append(organization)

print(f"Creating {NUM_FRIEND_CONNECTIONS} friend connections...")
for i in range(NUM_FRIEND_CONNECTIONS):
    sender, recipient = random.sample(entities, 2)

    try:
        store.befriend(sender, recipient)
    except DuplicateRelationship:
        print(f"Relationship between {sender} and {recipient} already exists")
        continue

    status = random.choice(list(TRANSITIONS))
    if TRANSITIONS[status]:
        TRANSITIONS[status](recipient, sender)

    print(f"Created friend connection: {sender} -> {recipient} ({status})")

print("\nSample data generation complete!")
print(f"Total users: {User.objects.count()}")
print(f"Total organizations: {Organization.objects.count()}")
for value, label in Status.CHOICES:
    print(f"{label} friendships: {Friendship.objects.filter(status=value).count()}")
