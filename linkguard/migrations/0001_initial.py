from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='TenantDomainRule',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tenant_id', models.CharField(db_index=True, max_length=64)),
                ('domain', models.CharField(max_length=255)),
                ('rule_type', models.CharField(choices=[('blocked', 'Blocked'), ('allowed', 'Allowed'), ('competitor', 'Competitor'), ('trusted', 'Trusted')], max_length=16)),
                ('reason', models.TextField(blank=True)),
                ('match_subdomains', models.BooleanField(default=True)),
                ('is_active', models.BooleanField(default=True)),
                ('times_blocked', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.AddConstraint(
            model_name='tenantdomainrule',
            constraint=models.UniqueConstraint(fields=('tenant_id', 'domain', 'rule_type'), name='unique_tenant_domain_rule'),
        ),
        migrations.AddIndex(
            model_name='tenantdomainrule',
            index=models.Index(fields=['tenant_id', 'rule_type'], name='domain_rules_tenant_type'),
        ),
    ]
