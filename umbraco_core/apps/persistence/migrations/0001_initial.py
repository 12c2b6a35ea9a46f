import uuid

import django.db.models.deletion
from django.db import migrations, models

import umbraco_core.lib.validators


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Node',
            fields=[
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('trashed', models.BooleanField(default=False)),
                ('node_user', models.IntegerField(db_column='nodeUser', null=True)),
                ('level', models.SmallIntegerField()),
                ('path', models.CharField(max_length=150, validators=[umbraco_core.lib.validators.validate_node_path])),
                ('sort_order', models.IntegerField(db_column='sortOrder')),
                ('unique_id', models.UUIDField(db_column='uniqueID', default=uuid.uuid4, editable=False, unique=True, verbose_name='UUID')),
                ('text', models.CharField(max_length=255, null=True)),
                ('node_object_type', models.UUIDField(db_column='nodeObjectType', db_index=True, null=True)),
                ('create_date', models.DateTimeField(db_column='createDate', validators=[umbraco_core.lib.validators.validate_utc_datetime])),
                ('parent', models.ForeignKey(db_column='parentID', on_delete=django.db.models.deletion.DO_NOTHING, related_name='children', to='umb_persistence.node')),
            ],
            options={
                'db_table': 'umbracoNode',
                'indexes': [models.Index(fields=['parent', 'node_object_type'], name='umb_node_parent_type_idx')],
            },
        ),
        migrations.CreateModel(
            name='ContentType',
            fields=[
                ('id', models.AutoField(db_column='pk', primary_key=True, serialize=False)),
                ('alias', models.CharField(max_length=255, null=True)),
                ('icon', models.CharField(max_length=255, null=True)),
                ('thumbnail', models.CharField(default='folder.png', max_length=255)),
                ('description', models.CharField(max_length=1500, null=True)),
                ('is_container', models.BooleanField(db_column='isContainer', default=False)),
                ('allow_at_root', models.BooleanField(db_column='allowAtRoot', default=False)),
                ('node', models.OneToOneField(db_column='nodeId', on_delete=django.db.models.deletion.DO_NOTHING, related_name='content_type_definition', to='umb_persistence.node')),
            ],
            options={
                'db_table': 'cmsContentType',
            },
        ),
        migrations.CreateModel(
            name='Content',
            fields=[
                ('id', models.AutoField(db_column='pk', primary_key=True, serialize=False)),
                ('node', models.OneToOneField(db_column='nodeId', on_delete=django.db.models.deletion.DO_NOTHING, related_name='content', to='umb_persistence.node')),
                ('content_type', models.ForeignKey(db_column='contentType', on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='umb_persistence.contenttype', to_field='node')),
            ],
            options={
                'db_table': 'cmsContent',
            },
        ),
        migrations.CreateModel(
            name='ContentVersion',
            fields=[
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('version_id', models.UUIDField(db_column='VersionId', default=uuid.uuid4, editable=False, unique=True, verbose_name='UUID')),
                ('version_date', models.DateTimeField(db_column='VersionDate', validators=[umbraco_core.lib.validators.validate_utc_datetime])),
                ('content', models.ForeignKey(db_column='ContentId', on_delete=django.db.models.deletion.DO_NOTHING, related_name='versions', to='umb_persistence.content', to_field='node')),
            ],
            options={
                'db_table': 'cmsContentVersion',
                'indexes': [models.Index(fields=['content', 'version_date'], name='umb_version_content_date_idx')],
            },
        ),
        migrations.CreateModel(
            name='DataType',
            fields=[
                ('id', models.AutoField(db_column='pk', primary_key=True, serialize=False)),
                ('property_editor_alias', models.CharField(db_column='propertyEditorAlias', max_length=255)),
                ('db_type', models.CharField(db_column='dbType', max_length=50)),
                ('node', models.OneToOneField(db_column='nodeId', on_delete=django.db.models.deletion.DO_NOTHING, related_name='data_type', to='umb_persistence.node')),
            ],
            options={
                'db_table': 'cmsDataType',
            },
        ),
        migrations.CreateModel(
            name='DataTypePreValue',
            fields=[
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('value', models.TextField(null=True)),
                ('sort_order', models.IntegerField(db_column='sortorder', default=0)),
                ('alias', models.CharField(max_length=50, null=True)),
                ('data_type', models.ForeignKey(db_column='datatypeNodeId', on_delete=django.db.models.deletion.DO_NOTHING, related_name='pre_values', to='umb_persistence.datatype', to_field='node')),
            ],
            options={
                'db_table': 'cmsDataTypePreValues',
            },
        ),
        migrations.CreateModel(
            name='PropertyType',
            fields=[
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('alias', models.CharField(db_column='Alias', max_length=255)),
                ('name', models.CharField(db_column='Name', max_length=255, null=True)),
                ('sort_order', models.IntegerField(db_column='sortOrder', default=0)),
                ('mandatory', models.BooleanField(default=False)),
                ('validation_reg_exp', models.CharField(db_column='validationRegExp', max_length=255, null=True)),
                ('description', models.CharField(db_column='Description', max_length=2000, null=True)),
                ('unique_id', models.UUIDField(db_column='UniqueID', default=uuid.uuid4, editable=False, unique=True, verbose_name='UUID')),
                ('content_type', models.ForeignKey(db_column='contentTypeId', on_delete=django.db.models.deletion.DO_NOTHING, related_name='property_types', to='umb_persistence.contenttype', to_field='node')),
                ('data_type', models.ForeignKey(db_column='dataTypeId', on_delete=django.db.models.deletion.DO_NOTHING, related_name='property_types', to='umb_persistence.datatype', to_field='node')),
            ],
            options={
                'db_table': 'cmsPropertyType',
                'constraints': [models.UniqueConstraint(fields=('content_type', 'alias'), name='umb_property_type_alias_uniq')],
            },
        ),
        migrations.CreateModel(
            name='PropertyData',
            fields=[
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('data_int', models.IntegerField(db_column='dataInt', null=True)),
                ('data_decimal', models.DecimalField(db_column='dataDecimal', decimal_places=6, max_digits=38, null=True)),
                ('data_date', models.DateTimeField(db_column='dataDate', null=True)),
                ('data_nvarchar', models.CharField(db_column='dataNvarchar', max_length=500, null=True)),
                ('data_ntext', models.TextField(db_column='dataNtext', null=True)),
                ('node', models.ForeignKey(db_column='contentNodeId', on_delete=django.db.models.deletion.DO_NOTHING, related_name='property_data', to='umb_persistence.node')),
                ('property_type', models.ForeignKey(db_column='propertytypeid', on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='umb_persistence.propertytype')),
                ('version', models.ForeignKey(db_column='versionId', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='property_data', to='umb_persistence.contentversion', to_field='version_id')),
            ],
            options={
                'db_table': 'cmsPropertyData',
                'constraints': [models.UniqueConstraint(fields=('version', 'property_type'), name='umb_property_data_version_type_uniq')],
            },
        ),
        migrations.CreateModel(
            name='Member',
            fields=[
                ('content', models.OneToOneField(db_column='nodeId', on_delete=django.db.models.deletion.DO_NOTHING, primary_key=True, related_name='member', serialize=False, to='umb_persistence.content', to_field='node')),
                ('email', models.CharField(db_column='Email', default='', max_length=1000)),
                ('login_name', models.CharField(db_column='LoginName', default='', max_length=1000)),
                ('password', models.CharField(db_column='Password', max_length=1000, null=True)),
            ],
            options={
                'db_table': 'cmsMember',
                'indexes': [models.Index(fields=['login_name'], name='umb_member_login_name_idx')],
            },
        ),
        migrations.CreateModel(
            name='Member2MemberGroup',
            fields=[
                ('pk', models.CompositePrimaryKey('member_id', 'member_group_id', blank=True, editable=False, primary_key=True, serialize=False)),
                ('member', models.ForeignKey(db_column='Member', on_delete=django.db.models.deletion.DO_NOTHING, related_name='group_links', to='umb_persistence.member')),
                ('member_group', models.ForeignKey(db_column='MemberGroup', on_delete=django.db.models.deletion.DO_NOTHING, related_name='member_links', to='umb_persistence.node')),
            ],
            options={
                'db_table': 'cmsMember2MemberGroup',
            },
        ),
        migrations.CreateModel(
            name='Tag',
            fields=[
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('tag', models.CharField(max_length=200, null=True)),
                ('group', models.CharField(max_length=100)),
            ],
            options={
                'db_table': 'cmsTags',
                'constraints': [models.UniqueConstraint(fields=('tag', 'group'), name='umb_tags_tag_group_uniq')],
            },
        ),
        migrations.CreateModel(
            name='TagRelationship',
            fields=[
                ('pk', models.CompositePrimaryKey('node_id', 'property_type_id', 'tag_id', blank=True, editable=False, primary_key=True, serialize=False)),
                ('node', models.ForeignKey(db_column='nodeId', on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='umb_persistence.node')),
                ('property_type', models.ForeignKey(db_column='propertyTypeId', on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='umb_persistence.propertytype')),
                ('tag', models.ForeignKey(db_column='tagId', on_delete=django.db.models.deletion.DO_NOTHING, related_name='relationships', to='umb_persistence.tag')),
            ],
            options={
                'db_table': 'cmsTagRelationship',
            },
        ),
        migrations.CreateModel(
            name='Task',
            fields=[
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('closed', models.BooleanField(default=False)),
                ('task_type_id', models.SmallIntegerField(db_column='taskTypeId')),
                ('parent_user_id', models.IntegerField(db_column='parentUserId')),
                ('user_id', models.IntegerField(db_column='userId')),
                ('date_time', models.DateTimeField(db_column='DateTime')),
                ('comment', models.CharField(db_column='Comment', max_length=500, null=True)),
                ('node', models.ForeignKey(db_column='nodeId', on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='umb_persistence.node')),
            ],
            options={
                'db_table': 'cmsTask',
            },
        ),
        migrations.CreateModel(
            name='User2NodeNotify',
            fields=[
                ('pk', models.CompositePrimaryKey('user_id', 'node_id', 'action', blank=True, editable=False, primary_key=True, serialize=False)),
                ('user_id', models.IntegerField(db_column='userId')),
                ('action', models.CharField(max_length=1)),
                ('node', models.ForeignKey(db_column='nodeId', on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='umb_persistence.node')),
            ],
            options={
                'db_table': 'umbracoUser2NodeNotify',
            },
        ),
        migrations.CreateModel(
            name='User2NodePermission',
            fields=[
                ('pk', models.CompositePrimaryKey('user_id', 'node_id', 'permission', blank=True, editable=False, primary_key=True, serialize=False)),
                ('user_id', models.IntegerField(db_column='userId')),
                ('permission', models.CharField(max_length=255)),
                ('node', models.ForeignKey(db_column='nodeId', on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='umb_persistence.node')),
            ],
            options={
                'db_table': 'umbracoUser2NodePermission',
            },
        ),
        migrations.CreateModel(
            name='Relation',
            fields=[
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('rel_type', models.IntegerField(db_column='relType')),
                ('datetime', models.DateTimeField()),
                ('comment', models.CharField(max_length=1000)),
                ('child', models.ForeignKey(db_column='childId', on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='umb_persistence.node')),
                ('parent', models.ForeignKey(db_column='parentId', on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='umb_persistence.node')),
            ],
            options={
                'db_table': 'umbracoRelation',
            },
        ),
        migrations.CreateModel(
            name='ContentXml',
            fields=[
                ('content', models.OneToOneField(db_column='nodeId', on_delete=django.db.models.deletion.DO_NOTHING, primary_key=True, related_name='xml', serialize=False, to='umb_persistence.content', to_field='node')),
                ('xml', models.TextField()),
            ],
            options={
                'db_table': 'cmsContentXml',
            },
        ),
    ]
