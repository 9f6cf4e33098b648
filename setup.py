"""
Setup script for the Gyroscope-aided Feature Tracking library.
"""

from setuptools import setup, find_packages
import os


def read_readme():
    """Read README file for long description."""
    if os.path.exists('README.md'):
        with open('README.md', 'r', encoding='utf-8') as f:
            return f.read()
    return "Gyroscope-aided frame-to-frame feature tracking"


# Core requirements (always installed)
install_requires = [
    'numpy>=1.19.0',
    'opencv-python>=5.0.0',
    'scipy>=1.6.0',
    'pandas>=1.2.0'
]

# Optional dependencies for different use cases
extras_require = {
    'dev': [
        'pytest>=6.0.0',
        'pytest-cov>=2.12.0',
        'black>=21.0.0',
        'isort>=5.9.0',
        'flake8>=3.9.0'
    ]
}

setup(
    name="gyro-feature-tracker",
    version="1.0.0",
    author="Feature Tracking Team",
    author_email="support@example.com",
    description="Gyroscope-aided keypoint tracking with binary descriptors for visual-inertial odometry",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=['tests', 'tests.*']),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: Image Recognition",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        'console_scripts': [
            'gyro-tracker-demo=FeatureTracking.demo:main',
        ],
    },
    keywords=[
        "computer vision",
        "feature tracking",
        "visual-inertial odometry",
        "gyroscope",
        "binary descriptors",
        "ORB",
        "BRISK"
    ]
)
