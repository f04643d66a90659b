"""
Setup script for surveymath package.
"""

from setuptools import setup, find_packages

setup(
    name="surveymath",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        # Core numerical dependencies
        "numpy>=1.20.0",
        "pandas>=1.3.0",
        
        # Database
        "sqlalchemy>=2.0.0",
        "psycopg2-binary>=2.9.0",
        
        # Web server
        "fastapi>=0.70.0",
        "uvicorn>=0.15.0",
        "pydantic>=1.8.0",
        
        # Utilities
        "pyyaml>=6.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=6.0.0",
            "httpx>=0.23.0",
            "scikit-learn>=1.0.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'surveymath=surveymath.__main__:main',
        ],
    },
    description="Analysis service for survey administration: PCA projection and word clouds",
    keywords="survey, pca, power iteration, word cloud",
    python_requires=">=3.8",
)
