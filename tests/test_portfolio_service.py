"""
portfolio-service 통합 테스트 (FastAPI TestClient)

테스트 대상:
- 로케일 리다이렉트 및 쿠키
- 페이지 렌더링 (홈, 블로그, 프로젝트, 문의, TaskFlow, 404)
- JSON API (게시물, 카테고리, 프로젝트, 문의)
- TaskFlow REST API 및 WebSocket 동기화
- /health, /stats, /metrics
"""
import pytest
import redis.asyncio as redis
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from folio.taskflow.sync import InMemoryBroker, Subscription
from portfolio_service import app, limiter, post_summary, templates


@pytest.fixture
def client():
    limiter.reset()
    with TestClient(app) as test_client:
        yield test_client


class BrokenSubscription(Subscription):
    async def open(self):
        pass

    async def get(self):
        raise redis.ConnectionError('Connection lost')

    async def close(self):
        pass


class BrokenBroker(InMemoryBroker):
    def subscribe(self, channel):
        return BrokenSubscription(channel)


class TestLocaleRouting:
    """로케일 접두사 리다이렉트 테스트"""

    def test_root_redirects_to_default_locale(self, client):
        response = client.get('/', follow_redirects=False)

        assert response.status_code == 307
        assert response.headers['location'] == '/en'

    def test_accept_language_and_query_preserved(self, client):
        """Accept-Language 선호 언어로 리다이렉트, 쿼리스트링 유지"""
        response = client.get(
            '/blog?category=guitar',
            headers={'Accept-Language': 'ko-KR,ko;q=0.9,en;q=0.8'},
            follow_redirects=False,
        )

        assert response.status_code == 307
        assert response.headers['location'] == '/ko/blog?category=guitar'

    def test_cookie_takes_precedence(self, client):
        client.cookies.set('locale', 'ja')

        response = client.get('/about', headers={'Accept-Language': 'th'}, follow_redirects=False)

        assert response.headers['location'] == '/ja/about'

    def test_localized_page_sets_cookie(self, client):
        response = client.get('/vi/about')

        assert response.status_code == 200
        assert '<html lang="vi">' in response.text
        assert response.cookies.get('locale') == 'vi'

    def test_unknown_locale_segment_redirected(self, client):
        response = client.get('/fr/blog', follow_redirects=False)

        assert response.headers['location'] == '/en/fr/blog'

    def test_api_not_redirected(self, client):
        response = client.get('/api/posts', follow_redirects=False)
        assert response.status_code == 200


class TestPages:
    """HTML 페이지 렌더링 테스트"""

    def test_home(self, client):
        response = client.get('/en')

        assert response.status_code == 200
        assert 'text/html' in response.headers['content-type']
        assert 'Getting Started with Next.js 15' in response.text
        assert 'Personal Blog &amp; Portfolio' in response.text

    def test_blog_list_filtered_by_category(self, client):
        response = client.get('/en/blog?category=guitar')

        assert response.status_code == 200
        assert 'Learning Guitar: First Month Journey' in response.text
        assert 'The Benefits of a Plant-Based Diet' not in response.text

    def test_blog_list_search(self, client):
        response = client.get('/en/blog?q=calisthenics')

        assert '5 Calisthenics Exercises for Beginners' in response.text
        assert 'Getting Started with Next.js 15' not in response.text

    def test_blog_list_no_results(self, client):
        """결과가 없으면 안내 메시지 표시"""
        response = client.get('/en/blog?q=zzz-nothing-matches')

        assert response.status_code == 200
        assert 'No posts found matching your criteria.' in response.text

    def test_blog_list_unknown_category(self, client):
        assert client.get('/en/blog?category=cooking').status_code == 422

    def test_blog_detail_renders_markdown(self, client):
        response = client.get('/en/blog/learning-guitar-first-month')

        assert response.status_code == 200
        assert '<strong>15 minutes every day</strong>' in response.text
        assert '4 min read' in response.text

    def test_blog_detail_not_found_page(self, client):
        response = client.get('/ko/blog/no-such-post')

        assert response.status_code == 404
        assert 'text/html' in response.headers['content-type']
        assert '<html lang="ko">' in response.text
        assert 'The requested resource was not found.' in response.text

    def test_unknown_page_not_found(self, client):
        response = client.get('/en/does/not/exist')

        assert response.status_code == 404
        assert 'text/html' in response.headers['content-type']

    def test_projects(self, client):
        response = client.get('/en/projects')

        assert response.status_code == 200
        assert 'Weather Dashboard' in response.text

    def test_project_detail(self, client):
        response = client.get('/en/projects/practice-log')

        assert response.status_code == 200
        assert 'Guitar Practice Log' in response.text
        assert client.get('/en/projects/missing').status_code == 404

    def test_taskflow_page(self, client):
        response = client.get('/en/taskflow')

        assert response.status_code == 200
        assert 'Hamaco Project' in response.text
        assert '/static/js/taskflow.js' in response.text

    def test_static_files(self, client):
        response = client.get('/static/css/site.css')
        assert response.status_code == 200


class TestContactPage:
    """HTML 문의 폼 제출 테스트"""

    def test_get_form(self, client):
        response = client.get('/en/contact')

        assert response.status_code == 200
        assert 'data-status="idle"' in response.text

    def test_script_binds_submit_on_fresh_form(self, client):
        """알림이 없는 새 폼에서도 제출 시 sending 표시가 연결됨"""
        assert '/static/js/contact.js' in client.get('/en/contact').text

        script = client.get('/static/js/contact.js').text
        assert script.index("addEventListener('submit'") < script.index('if (!alert) return;')

    def test_submit_success(self, client, contact_form):
        response = client.post('/en/contact', data=contact_form)

        assert response.status_code == 200
        assert 'Message sent successfully!' in response.text
        assert 'data-status="success"' in response.text
        # 성공 시 폼 초기화
        assert 'Jane Doe' not in response.text

    def test_submit_invalid_rerenders_form(self, client, contact_form):
        """검증 실패 시 입력값을 유지한 채 idle 상태로 재렌더링"""
        contact_form['email'] = 'not-an-email'

        response = client.post('/en/contact', data=contact_form)

        assert response.status_code == 422
        assert 'data-status="idle"' in response.text
        assert 'value="Jane Doe"' in response.text
        assert 'Please check your input and try again.' in response.text


class TestPostsAPI:

    def test_list_posts_in_source_order(self, client):
        response = client.get('/api/posts')

        assert response.status_code == 200
        posts = response.json()
        assert [p['id'] for p in posts] == ['1', '2', '3', '4']
        assert 'content' not in posts[0]
        assert posts[0]['category'] == {'slug': 'technology', 'label': 'Technology', 'color': 'blue'}

    def test_filter_by_category_and_search(self, client):
        assert [p['id'] for p in client.get('/api/posts?category=technology').json()] == ['1']
        assert [p['id'] for p in client.get('/api/posts?search=GUITAR').json()] == ['4']
        assert client.get('/api/posts?category=health&search=guitar').json() == []

    @pytest.mark.parametrize('value', ['All', 'ALL', ' all '])
    def test_all_category_any_case(self, client, value):
        """'all'은 대소문자와 관계없이 전체 카테고리"""
        response = client.get('/api/posts', params={'category': value})

        assert response.status_code == 200
        assert [p['id'] for p in response.json()] == ['1', '2', '3', '4']

    def test_filter_by_tags_and_featured(self, client):
        assert [p['id'] for p in client.get('/api/posts?tags=Music&tags=learning').json()] == ['4']
        assert [p['id'] for p in client.get('/api/posts?featured=true').json()] == ['1']

    def test_unknown_category(self, client):
        response = client.get('/api/posts?category=cooking')

        assert response.status_code == 422
        assert 'cooking' in response.json()['detail']

    def test_post_detail(self, client):
        response = client.get('/api/posts/learning-guitar-first-month')

        assert response.status_code == 200
        post = response.json()
        assert post['title'] == 'Learning Guitar: First Month Journey'
        assert post['content_html'].startswith('<h1>')
        assert post['author']['name']

    def test_post_summary_strips_title_markup(self, make_post):
        """API 응답의 제목은 HTML 태그 제거"""
        summary = post_summary(make_post(title='<b>Bold</b> move'))

        assert summary['title'] == 'Bold move'

    def test_clean_title_filter_strips_markup(self):
        rendered = templates.env.from_string('<h1>{{ title|clean_title }}</h1>').render(
            title='<img src=x onerror=alert(1)>Guitar <em>notes</em>'
        )

        assert rendered == '<h1>Guitar notes</h1>'

    def test_post_not_found_is_json(self, client):
        response = client.get('/api/posts/nope')

        assert response.status_code == 404
        assert response.json() == {'detail': {'error': 'Post not found'}}

    def test_unknown_api_path_is_json(self, client):
        response = client.get('/api/unknown')

        assert response.status_code == 404
        assert response.headers['content-type'].startswith('application/json')

    def test_categories_with_counts(self, client):
        categories = {c['slug']: c for c in client.get('/api/categories').json()}

        assert list(categories) == ['technology', 'health', 'calisthenics', 'guitar', 'lifestyle', 'other']
        assert categories['technology']['post_count'] == 1
        assert categories['lifestyle']['post_count'] == 0


class TestProjectsAPI:

    def test_filter_by_status(self, client):
        projects = client.get('/api/projects?status=planned').json()
        assert [p['slug'] for p in projects] == ['practice-log']

    def test_invalid_status(self, client):
        assert client.get('/api/projects?status=abandoned').status_code == 422

    def test_project_detail(self, client):
        response = client.get('/api/projects/personal-blog')

        assert response.status_code == 200
        assert response.json()['featured'] is True
        assert client.get('/api/projects/missing').status_code == 404


class TestContactAPI:

    def test_submit_success(self, client, contact_form):
        response = client.post('/api/contact', json=contact_form)

        assert response.status_code == 200
        assert response.json() == {
            'status': 'success',
            'message': 'Message sent successfully!',
            'reset_after': 0.05,
        }

    def test_missing_field(self, client, contact_form):
        del contact_form['subject']
        assert client.post('/api/contact', json=contact_form).status_code == 422

    def test_rate_limited(self, client, contact_form):
        """CONTACT_RATE_LIMIT(5/minute) 초과 시 429"""
        statuses = [client.post('/api/contact', json=contact_form).status_code for _ in range(6)]

        assert statuses[:5] == [200] * 5
        assert statuses[5] == 429


class TestTaskFlowAPI:

    def test_list_tasks_seeded(self, client):
        response = client.get('/api/taskflow/tasks')

        assert response.status_code == 200
        assert 'task_1' in {t['id'] for t in response.json()}

    def test_task_lifecycle(self, client):
        created = client.post('/api/taskflow/tasks', json={'title': 'Practice scales', 'is_my_day': True})
        assert created.status_code == 201
        task_id = created.json()['id']
        assert created.json()['created_by'] == 'demo_user'

        toggled = client.post(f'/api/taskflow/tasks/{task_id}/toggle-complete')
        assert toggled.json()['status'] == 'completed'

        updated = client.patch(f'/api/taskflow/tasks/{task_id}', json={'title': 'Practice arpeggios'})
        assert updated.json()['title'] == 'Practice arpeggios'
        assert updated.json()['status'] == 'completed'

        with_sub = client.post(f'/api/taskflow/tasks/{task_id}/subtasks', json={'title': 'C major'})
        assert with_sub.status_code == 201
        sub_id = with_sub.json()['sub_tasks'][0]['id']
        assert client.delete(f'/api/taskflow/tasks/{task_id}/subtasks/{sub_id}').json()['sub_tasks'] == []

        assert client.delete(f'/api/taskflow/tasks/{task_id}').status_code == 204
        assert client.get(f'/api/taskflow/tasks/{task_id}').status_code == 404

    def test_search_filter(self, client):
        tasks = client.get('/api/taskflow/tasks?search=inventory').json()
        assert [t['id'] for t in tasks] == ['task_herbalife_2']

    def test_missing_task(self, client):
        response = client.post('/api/taskflow/tasks/missing/toggle-important')

        assert response.status_code == 404
        assert response.json() == {'detail': {'error': 'Task not found'}}

    def test_invalid_task_payload(self, client):
        assert client.post('/api/taskflow/tasks', json={'title': ''}).status_code == 422

    def test_projects_with_task_count(self, client):
        projects = {p['id']: p for p in client.get('/api/taskflow/projects').json()}

        assert projects['project_hamaco']['task_count'] == 2

    def test_project_lifecycle(self, client):
        created = client.post('/api/taskflow/projects', json={'name': 'Band', 'color': '#112233'})
        assert created.status_code == 201
        project_id = created.json()['id']

        client.post('/api/taskflow/tasks', json={'title': 'Book rehearsal', 'project_id': project_id})
        assert len(client.get(f'/api/taskflow/projects/{project_id}/tasks').json()) == 1

        assert client.delete(f'/api/taskflow/projects/{project_id}').status_code == 204
        assert client.get(f'/api/taskflow/projects/{project_id}/tasks').status_code == 404
        assert all(t['project_id'] != project_id for t in client.get('/api/taskflow/tasks').json())

    def test_invalid_project_color(self, client):
        assert client.post('/api/taskflow/projects', json={'name': 'X', 'color': 'red'}).status_code == 422

    def test_malformed_authorization(self, client):
        response = client.get('/api/taskflow/tasks', headers={'Authorization': 'Basic abc'})
        assert response.status_code == 401


class TestTaskFlowSync:
    """WebSocket 동기화 테스트"""

    def test_receives_updates_after_mutation(self, client):
        with client.websocket_connect('/api/taskflow/sync') as websocket:
            ack = websocket.receive_json()
            assert ack == {'type': 'subscribed', 'channel': 'taskflow:demo_user', 'user_id': 'demo_user'}

            client.post('/api/taskflow/tasks', json={'title': 'Synced over websocket'})
            event = websocket.receive_json()

        assert event['type'] == 'tasks'
        assert event['user_id'] == 'demo_user'
        assert any(t['title'] == 'Synced over websocket' for t in event['data'])

    def test_rejects_malformed_authorization(self, client):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect('/api/taskflow/sync', headers={'Authorization': 'Basic abc'}):
                pass

        assert exc_info.value.code == 1008

    def test_broken_subscription_closes_socket(self, client, monkeypatch):
        """구독 스트림 오류 시 조용히 멈추지 않고 1011로 연결 종료"""
        monkeypatch.setattr(app.state, 'broker', BrokenBroker())

        with client.websocket_connect('/api/taskflow/sync') as websocket:
            assert websocket.receive_json()['type'] == 'subscribed'

            with pytest.raises(WebSocketDisconnect) as exc_info:
                websocket.receive_json()

        assert exc_info.value.code == 1011


class TestOperationalEndpoints:

    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.json()['status'] == 'ok'

    def test_stats(self, client):
        stats = client.get('/stats').json()['portfolio_service']

        assert stats['post_count'] == 4
        assert stats['project_count'] == 7
        assert stats['contact_message_count'] is None

    def test_metrics(self, client):
        client.get('/health')
        response = client.get('/metrics')

        assert response.status_code == 200
        assert 'http_requests_total' in response.text
