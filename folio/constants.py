# folio/constants.py
from folio.config import SITE_URL
from folio.models.schemas import BlogCategory

# Sentinel accepted by the blog filter in place of a category
ALL_CATEGORIES = 'all'

SITE_CONFIG = {
    'name': 'Personal Blog & Portfolio',
    'title': 'Your Name - Full Stack Developer',
    'description': (
        'Personal blog and portfolio showcasing projects, skills, and thoughts on '
        'technology, health, fitness, and music.'
    ),
    'url': SITE_URL,
    'author': 'Your Name',
    'email': 'your.email@example.com',
    'social': {
        'github': 'https://github.com/yourusername',
        'linkedin': 'https://linkedin.com/in/yourusername',
        'twitter': 'https://twitter.com/yourusername',
    },
}

# Blog Categories with Display Information
BLOG_CATEGORIES = {
    BlogCategory.TECHNOLOGY: {
        'label': 'Technology',
        'description': 'Web development, programming, and tech trends',
        'color': 'blue',
        'icon': 'code',
    },
    BlogCategory.HEALTH: {
        'label': 'Health',
        'description': 'Wellness, nutrition, and healthy living',
        'color': 'green',
        'icon': 'heart',
    },
    BlogCategory.CALISTHENICS: {
        'label': 'Calisthenics',
        'description': 'Bodyweight training and fitness',
        'color': 'orange',
        'icon': 'dumbbell',
    },
    BlogCategory.GUITAR: {
        'label': 'Guitar',
        'description': 'Music, guitar playing, and learning',
        'color': 'purple',
        'icon': 'music',
    },
    BlogCategory.LIFESTYLE: {
        'label': 'Lifestyle',
        'description': 'Personal development and life experiences',
        'color': 'pink',
        'icon': 'sparkles',
    },
    BlogCategory.OTHER: {
        'label': 'Other',
        'description': 'Miscellaneous topics and thoughts',
        'color': 'gray',
        'icon': 'folder',
    },
}

NAV_LINKS = [
    {'label': 'Home', 'href': '/'},
    {'label': 'About', 'href': '/about'},
    {'label': 'Blog', 'href': '/blog'},
    {'label': 'Projects', 'href': '/projects'},
    {'label': 'Contact', 'href': '/contact'},
]

NO_RESULTS_MESSAGE = 'No posts found matching your criteria.'

ERROR_MESSAGES = {
    'generic': 'Something went wrong. Please try again.',
    'not_found': 'The requested resource was not found.',
    'unauthorized': 'You are not authorized to access this resource.',
    'validation': 'Please check your input and try again.',
}

SUCCESS_MESSAGES = {
    'sent': 'Message sent successfully!',
}
