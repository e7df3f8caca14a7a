from setuptools import setup, find_packages
from pathlib import Path

# -------------------------------
# Long Description
# -------------------------------
this_directory = Path(__file__).parent
readme_file = this_directory / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

# -------------------------------
# Load Dependencies
# -------------------------------
def read_requirements(file_name="requirements.txt"):
    """Read dependencies from requirements.txt (ignore comments & blank lines)."""
    requirements = []
    try:
        with open(this_directory / file_name, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and not line.startswith("-"):
                    requirements.append(line)
    except FileNotFoundError:
        print(f"⚠️ {file_name} not found; installing without dependencies.")
    return requirements


install_requires = read_requirements()

# -------------------------------
# Package Configuration
# -------------------------------
setup(
    name="familyfund-fraud-engine",
    version="1.0.0",
    description="Fraud risk scoring for family-fund payment claims (FastAPI + SQLAlchemy).",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    packages=find_packages(include=["familyfund", "familyfund.*"]),
    include_package_data=True,
    zip_safe=False,
    python_requires=">=3.10",
    install_requires=install_requires,
    extras_require={
        "test": [
            "pytest>=8.3.3",
            "pytest-mock>=3.14.0",
            "httpx>=0.27.0",
        ],
        "dev": [
            "pytest>=8.3.3",
            "pytest-mock>=3.14.0",
            "httpx>=0.27.0",
            "black>=24.8.0",
            "flake8>=7.0.0",
            "coverage>=7.6.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "familyfund-api=familyfund.main:run_api",    # Run FastAPI app
            "familyfund-score=familyfund.cli:main",      # Score one claim from the shell
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Security",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.10",
        "Operating System :: OS Independent",
    ],
)
