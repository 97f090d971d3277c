"""
Setup script for the Clinic Chat client.
"""

from setuptools import setup, find_packages
import os

# Read the README file for long description
def read_readme():
    """Read README.md file."""
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return "Clinic appointment schedule with a WebSocket patient chat, in the terminal."

# Read requirements from requirements.txt
def read_requirements():
    """Read requirements from requirements.txt."""
    requirements_path = os.path.join(os.path.dirname(__file__), 'requirements.txt')
    requirements = []
    if os.path.exists(requirements_path):
        with open(requirements_path, 'r', encoding='utf-8') as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith('#'):
                    requirements.append(line)
    return requirements

TEST_REQUIREMENTS = [
    "pytest>=7.0.0",
    "pytest-cov>=4.0.0",
    "hypothesis>=6.0.0",
]

setup(
    name="clinic-chat",
    version="1.0.0",
    author="Clinic Chat Development Team",
    description="Clinic appointment schedule with a WebSocket patient chat, in the terminal",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=['tests*']),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Healthcare Industry",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Communications :: Chat",
        "Topic :: Terminals",
    ],
    python_requires=">=3.10",
    install_requires=read_requirements(),
    extras_require={
        "yaml": ["PyYAML>=6.0,<7.0"],
        "test": TEST_REQUIREMENTS,
        "dev": TEST_REQUIREMENTS + [
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "clinic-chat=clinic_chat.client.main:main",
        ],
    },
    include_package_data=True,
    package_data={
        "clinic_chat.schedule": [
            "*.json",
        ],
    },
    keywords="clinic, schedule, chat, websocket, terminal, rich",
    zip_safe=False,
)
