from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('contenttypes', '0002_remove_content_type_name'),
    ]

    operations = [
        migrations.CreateModel(
            name='Friendship',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('sender_id', models.PositiveBigIntegerField()),
                ('recipient_id', models.PositiveBigIntegerField()),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('accepted', 'Accepted'), ('denied', 'Denied'), ('blocked', 'Blocked')], default='pending', max_length=10)),
                ('pair_key', models.CharField(editable=False, max_length=64, unique=True)),
                ('sender_type', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='+', to='contenttypes.contenttype')),
                ('recipient_type', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='+', to='contenttypes.contenttype')),
            ],
            options={
                'ordering': ['id'],
                'indexes': [
                    models.Index(fields=['sender_type', 'sender_id', 'status'], name='friends_sender_status_idx'),
                    models.Index(fields=['recipient_type', 'recipient_id', 'status'], name='friends_recipient_status_idx'),
                ],
            },
        ),
    ]
