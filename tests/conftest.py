"""
portfolio-service 단위 테스트를 위한 pytest fixtures
"""
import os
import sys
import pytest
import tempfile
from datetime import datetime, timezone

# folio.config는 import 시점에 환경변수를 읽으므로 먼저 설정
os.environ['SITE_URL'] = 'http://testserver'
os.environ['ALLOWED_ORIGINS'] = 'http://localhost:3000'
os.environ['AUTH_SERVICE_URL'] = 'http://test-auth-service:8002'
os.environ['SYNC_BACKEND'] = 'memory'
os.environ['CONTACT_BACKEND'] = 'simulated'
os.environ['CONTACT_SEND_DELAY'] = '0'
os.environ['CONTACT_RESET_DELAY'] = '0.05'
os.environ['CONTACT_RATE_LIMIT'] = '5/minute'

# 프로젝트 루트를 path에 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@pytest.fixture
def temp_db_path():
    """테스트용 임시 SQLite 데이터베이스 경로"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield os.path.join(tmpdir, 'test_site.db')


@pytest.fixture
def sample_author():
    return {
        'name': 'Test Author',
        'email': 'author@example.com',
    }


@pytest.fixture
def make_post(sample_author):
    """테스트용 게시물 생성 팩토리"""
    from folio.models.schemas import BlogPost

    def _make(**overrides):
        data = {
            'id': overrides.pop('id', '1'),
            'title': 'Test Post Title',
            'excerpt': 'A short excerpt.',
            'content': 'This is the content of the test post.',
            'category': 'technology',
            'tags': [],
            'author': sample_author,
            'published_at': datetime(2024, 1, 1, tzinfo=timezone.utc),
            'updated_at': datetime(2024, 1, 1, tzinfo=timezone.utc),
        }
        data.update(overrides)
        return BlogPost(**data)

    return _make


@pytest.fixture
def sample_posts(make_post):
    """테스트용 다중 게시물 데이터 (원본 순서가 의미를 가짐)"""
    return [
        make_post(id='1', title='React Hooks Deep Dive', category='technology', tags=['React', 'JavaScript'], featured=True),
        make_post(id='2', title='Morning Stretch Routine', category='health', excerpt='Loosen up before work.', tags=['Wellness']),
        make_post(id='3', title='Python Tips', category='technology', excerpt='Small tricks for React developers too.', tags=['Python']),
        make_post(id='4', title='Draft Post', category='guitar', published=False),
    ]


@pytest.fixture
def contact_form():
    """테스트용 문의 폼 데이터"""
    return {
        'name': 'Jane Doe',
        'email': 'jane@example.com',
        'subject': 'Hello',
        'message': 'I enjoyed your latest post.',
    }


@pytest.fixture
def xss_payloads():
    """XSS 공격 테스트용 페이로드"""
    return [
        '<script>alert("XSS")</script>',
        '<img src=x onerror=alert("XSS")>',
        '<svg onload=alert("XSS")>',
        '<body onload=alert("XSS")>',
        '<iframe src="javascript:alert(\'XSS\')">',
        '<a href="javascript:alert(\'XSS\')">Click me</a>',
        '<div onclick="alert(\'XSS\')">Click</div>',
        '"><script>alert("XSS")</script>',
    ]
