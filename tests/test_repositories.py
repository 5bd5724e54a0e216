"""
PostRepository / ProjectRepository 단위 테스트
"""
import pytest

from folio.data import SAMPLE_POSTS, SAMPLE_PROJECTS
from folio.models.schemas import BlogCategory, ProjectStatus
from folio.repositories import PostRepository, ProjectRepository


class TestPostRepository:

    @pytest.fixture
    def repo(self, sample_posts):
        return PostRepository(sample_posts)

    def test_duplicate_slugs_rejected(self, make_post):
        """slug는 전체 컬렉션에서 유일해야 함"""
        with pytest.raises(ValueError, match='Duplicate'):
            PostRepository([make_post(id='1', slug='same'), make_post(id='2', slug='same')])

    @pytest.mark.asyncio
    async def test_unpublished_posts_hidden(self, repo):
        posts = await repo.get_all()
        assert [p.id for p in posts] == ['1', '2', '3']
        assert await repo.get_by_slug('draft-post') is None

    @pytest.mark.asyncio
    async def test_get_by_slug(self, repo):
        post = await repo.get_by_slug('morning-stretch-routine')
        assert post is not None
        assert post.id == '2'

    @pytest.mark.asyncio
    async def test_get_all_with_filters(self, repo):
        posts = await repo.get_all(category='technology', search='python')
        assert [p.id for p in posts] == ['3']

    @pytest.mark.asyncio
    async def test_get_all_unknown_category(self, repo):
        with pytest.raises(ValueError):
            await repo.get_all(category='cooking')

    @pytest.mark.asyncio
    async def test_featured_and_recent(self, repo):
        assert [p.id for p in await repo.get_featured()] == ['1']
        assert [p.id for p in await repo.get_recent(limit=2)] == ['1', '2']

    @pytest.mark.asyncio
    async def test_count_by_category_includes_empty(self, repo):
        counts = await repo.count_by_category()

        assert set(counts) == set(BlogCategory)
        assert counts[BlogCategory.TECHNOLOGY] == 2
        assert counts[BlogCategory.HEALTH] == 1
        # 미게시 글은 집계 제외
        assert counts[BlogCategory.GUITAR] == 0

    @pytest.mark.asyncio
    async def test_sample_content(self):
        repo = PostRepository(SAMPLE_POSTS)

        assert await repo.count() == 4
        assert await repo.count(category='guitar') == 1


class TestProjectRepository:

    @pytest.fixture
    def repo(self):
        return ProjectRepository(SAMPLE_PROJECTS)

    @pytest.mark.asyncio
    async def test_get_by_slug(self, repo):
        project = await repo.get_by_slug('personal-blog')
        assert project.title == 'Personal Blog & Portfolio'
        assert await repo.get_by_slug('missing') is None

    @pytest.mark.asyncio
    async def test_filter_by_status(self, repo):
        in_progress = await repo.get_all(status='in-progress')
        assert {p.slug for p in in_progress} == {'ecommerce-platform', 'recipe-sharing-platform'}
        assert all(p.status == ProjectStatus.IN_PROGRESS for p in in_progress)

    @pytest.mark.asyncio
    async def test_filter_featured(self, repo):
        featured = await repo.get_all(featured=True)
        assert [p.slug for p in featured] == ['personal-blog', 'task-management-app']

    @pytest.mark.asyncio
    async def test_invalid_status(self, repo):
        with pytest.raises(ValueError):
            await repo.get_all(status='abandoned')

    def test_duplicate_slugs_rejected(self):
        with pytest.raises(ValueError):
            ProjectRepository([SAMPLE_PROJECTS[0], SAMPLE_PROJECTS[0]])
