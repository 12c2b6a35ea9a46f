"""
Repositories hand out entities and store them, one repository per kind of
entity. Each takes its collaborators (events, caches, other repositories) at
construction time.
"""
from .base import DefaultRepositoryCachePolicy, NoCacheRepositoryCachePolicy, RepositoryCachePolicy
from .data_type import DataTypeRepository
from .member import MemberRepository
from .member_group import MemberGroupRepository
from .member_type import MemberTypeRepository
from .tag import TagRepository, TaggedValue
from .versionable import VersionableRepositoryBase
