# folio/data/projects.py
from datetime import date

from folio.models.schemas import Project

SAMPLE_PROJECTS = [
    Project(
        id='1',
        slug='personal-blog',
        title='Personal Blog & Portfolio',
        short_description='A fully internationalized blog and portfolio website.',
        description=(
            'A modern, fully internationalized blog and portfolio website. '
            'Features dark mode, multilingual support, and responsive design.'
        ),
        features=[
            'Multilingual support (6 languages)',
            'Dark/Light theme with smooth transitions',
            'Fully responsive design',
            'SEO optimized',
        ],
        technologies=['Python', 'FastAPI', 'Jinja2', 'Tailwind CSS'],
        image_url='https://images.unsplash.com/photo-1499750310107-5fef28a66643?w=800&q=80',
        demo_url='https://yourblog.com',
        github_url='https://github.com/yourusername/personal-blog',
        featured=True,
        status='completed',
        start_date=date(2024, 9, 1),
        end_date=date(2024, 11, 15),
    ),
    Project(
        id='2',
        slug='task-management-app',
        title='Task Management Application',
        short_description='Full-stack task management with real-time updates.',
        description=(
            'A full-stack task management application with user authentication, '
            'real-time updates, and team collaboration features.'
        ),
        features=[
            'User authentication and authorization',
            'Real-time task updates',
            'Team collaboration',
            'Drag-and-drop interface',
            'Email notifications',
        ],
        technologies=['React', 'Node.js', 'MongoDB', 'Express'],
        image_url='https://images.unsplash.com/photo-1484480974693-6ca0a78fb36b?w=800&q=80',
        demo_url='https://task-app.com',
        github_url='https://github.com/yourusername/task-app',
        featured=True,
        status='completed',
        start_date=date(2024, 3, 1),
        end_date=date(2024, 7, 30),
    ),
    Project(
        id='3',
        slug='ecommerce-platform',
        title='E-commerce Platform',
        short_description='Payments, inventory management and an admin dashboard.',
        description=(
            'A complete e-commerce solution with payment integration, inventory '
            'management, and admin dashboard.'
        ),
        features=[
            'Stripe payment integration',
            'Product management',
            'Shopping cart',
            'Order tracking',
            'Admin dashboard',
        ],
        technologies=['Next.js', 'Stripe', 'PostgreSQL', 'Prisma'],
        image_url='https://images.unsplash.com/photo-1557821552-17105176677c?w=800&q=80',
        github_url='https://github.com/yourusername/ecommerce',
        status='in-progress',
        start_date=date(2024, 10, 1),
    ),
    Project(
        id='4',
        slug='fitness-tracker',
        title='Fitness Tracking Mobile App',
        short_description='Track workouts, nutrition and progress.',
        description=(
            'A mobile application for tracking workouts, nutrition, and progress '
            'with social features.'
        ),
        features=[
            'Workout logging',
            'Nutrition tracking',
            'Progress charts',
            'Social sharing',
            'Custom workout plans',
        ],
        technologies=['React Native', 'Firebase', 'Redux'],
        image_url='https://images.unsplash.com/photo-1517836357463-d25dfeac3438?w=800&q=80',
        github_url='https://github.com/yourusername/fitness-tracker',
        status='completed',
        start_date=date(2023, 6, 1),
        end_date=date(2023, 12, 20),
    ),
    Project(
        id='5',
        slug='weather-dashboard',
        title='Weather Dashboard',
        short_description='Interactive forecasts, charts and location-based weather.',
        description=(
            'An interactive weather dashboard with forecasts, charts, and '
            'location-based weather information.'
        ),
        features=[
            'Real-time weather data',
            '7-day forecast',
            'Interactive charts',
            'Multiple locations',
            'Weather alerts',
        ],
        technologies=['Vue.js', 'OpenWeather API', 'Chart.js'],
        image_url='https://images.unsplash.com/photo-1592210454359-9043f067919b?w=800&q=80',
        demo_url='https://weather.com',
        github_url='https://github.com/yourusername/weather-dashboard',
        status='completed',
        start_date=date(2023, 2, 1),
        end_date=date(2023, 4, 15),
    ),
    Project(
        id='6',
        slug='recipe-sharing-platform',
        title='Recipe Sharing Platform',
        short_description='Share and discover recipes with ratings and meal planning.',
        description=(
            'A social platform for sharing and discovering recipes with ratings, '
            'comments, and meal planning features.'
        ),
        features=[
            'Recipe creation and sharing',
            'Ratings and comments',
            'Meal planning',
        ],
        technologies=['Next.js', 'Supabase', 'TypeScript'],
        image_url='https://images.unsplash.com/photo-1495521821757-a1efb6729352?w=800&q=80',
        github_url='https://github.com/yourusername/recipe-platform',
        status='in-progress',
        start_date=date(2024, 8, 1),
    ),
    Project(
        id='7',
        slug='practice-log',
        title='Guitar Practice Log',
        short_description='A small tool for logging daily guitar practice.',
        description='A command-line practice journal with streaks and a metronome.',
        technologies=['Python', 'Click', 'SQLite'],
        status='planned',
        start_date=date(2025, 1, 1),
    ),
]
