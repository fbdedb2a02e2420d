# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="storyshelf",
    version="0.4.0",
    description="Storybook content tree, story loading and live preview for server-rendered components",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["storyshelf*"]),
    package_data={
        "storyshelf.interface.web": ["templates/*.html"],
    },
    python_requires=">=3.9",
    install_requires=[
        "fastapi",
        "jinja2",
        "pydantic",
        "uvicorn",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        'console_scripts': [
            'storyshelf=storyshelf.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
