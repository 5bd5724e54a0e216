# folio/data/blog_posts.py
# Sample blog posts, newest first.
from datetime import datetime, timezone

from folio.models.schemas import Author, BlogPost

SITE_AUTHOR = Author(
    name='Your Name',
    bio='Full Stack Developer',
    email='your.email@example.com',
)

NEXTJS_CONTENT = """
# Introduction

Next.js 15 brings exciting new features and improvements to help you build better web applications. In this post, we'll explore the key features and how to get started.

## What's New in Next.js 15

Next.js 15 introduces several powerful features:

### 1. Improved Performance

The new version comes with significant performance improvements, including:
- Faster build times
- Optimized bundle sizes
- Better caching strategies

### 2. Enhanced Developer Experience

Developer experience has been a top priority:
- Better error messages
- Improved hot reload
- TypeScript improvements

## Getting Started

To create a new Next.js 15 project, run:

```bash
npx create-next-app@latest my-app
cd my-app
npm run dev
```

## Project Structure

A typical Next.js 15 project structure looks like this:

```
my-app/
├── app/
│   ├── layout.tsx
│   └── page.tsx
├── components/
├── public/
└── package.json
```

## Conclusion

Next.js 15 is a powerful framework that makes building modern web applications easier and more enjoyable. Give it a try!
"""

CALISTHENICS_CONTENT = """
# Five Moves to Start With

You don't need a gym to get strong. These five exercises cover the whole body:

1. **Push-ups** for chest, shoulders and triceps
2. **Bodyweight squats** for legs and glutes
3. **Australian rows** for the upper back
4. **Plank** for core stability
5. **Glute bridges** for the posterior chain

| Exercise | Sets | Reps |
|----------|------|------|
| Push-ups | 3 | 8-12 |
| Squats | 3 | 15-20 |
| Rows | 3 | 8-12 |

Start with three sessions a week and add reps before adding difficulty.
"""

PLANT_BASED_CONTENT = """
# Eating More Plants

A plant-based diet doesn't have to mean giving up everything you like. Small swaps add up:

- Replace one meat meal a week with beans or lentils
- Add a serving of leafy greens to lunch
- Snack on nuts and fruit instead of chips

> Progress beats perfection. Start with one change and keep it.

More fibre, more micronutrients and, for many people, more energy.
"""

GUITAR_CONTENT = """
# My First Month with a Guitar

The first weeks were mostly sore fingertips and buzzing strings. What helped:

- Practising **15 minutes every day** instead of two hours on Sunday
- Learning the open chords G, C, D and E minor first
- Using a metronome from day one

By the end of the month I could switch between chords in time with a slow song. Next goal: barre chords.
"""

SAMPLE_POSTS = [
    BlogPost(
        id='1',
        title='Getting Started with Next.js 15',
        excerpt=(
            'Learn how to build modern web applications with Next.js 15, '
            'the latest version of the popular React framework.'
        ),
        content=NEXTJS_CONTENT,
        category='technology',
        tags=['Next.js', 'React', 'Web Development'],
        author=SITE_AUTHOR,
        cover_image='/static/images/blog/nextjs.jpg',
        published_at=datetime(2024, 1, 15, tzinfo=timezone.utc),
        updated_at=datetime(2024, 1, 15, tzinfo=timezone.utc),
        reading_time=5,
        featured=True,
    ),
    BlogPost(
        id='2',
        title='5 Calisthenics Exercises for Beginners',
        excerpt=(
            'Start your calisthenics journey with these fundamental bodyweight '
            'exercises that build strength and muscle.'
        ),
        content=CALISTHENICS_CONTENT,
        category='calisthenics',
        tags=['Fitness', 'Bodyweight', 'Training'],
        author=SITE_AUTHOR,
        cover_image='/static/images/blog/calisthenics.jpg',
        published_at=datetime(2024, 1, 10, tzinfo=timezone.utc),
        updated_at=datetime(2024, 1, 10, tzinfo=timezone.utc),
        reading_time=7,
    ),
    BlogPost(
        id='3',
        title='The Benefits of a Plant-Based Diet',
        slug='benefits-of-plant-based-diet',
        excerpt='Discover the health benefits of incorporating more plant-based foods into your daily meals.',
        content=PLANT_BASED_CONTENT,
        category='health',
        tags=['Nutrition', 'Health', 'Lifestyle'],
        author=SITE_AUTHOR,
        cover_image='/static/images/blog/health.jpg',
        published_at=datetime(2024, 1, 5, tzinfo=timezone.utc),
        updated_at=datetime(2024, 1, 5, tzinfo=timezone.utc),
        reading_time=6,
    ),
    BlogPost(
        id='4',
        title='Learning Guitar: First Month Journey',
        slug='learning-guitar-first-month',
        excerpt='My experience and lessons learned during the first month of learning to play guitar.',
        content=GUITAR_CONTENT,
        category='guitar',
        tags=['Music', 'Learning', 'Guitar'],
        author=SITE_AUTHOR,
        cover_image='/static/images/blog/guitar.jpg',
        published_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        reading_time=4,
    ),
]
