from setuptools import setup, find_packages

setup(
    name="barao-espetinhos",
    version="1.0.0",
    packages=find_packages(include=["barao", "barao.*"]),
    install_requires=[
        "django>=4.0",
        "djangorestframework",
        "drf-spectacular",
        "python-decouple",
        "requests",
        "Pillow",
        "asgiref",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-django",
        ],
    },
    python_requires=">=3.11",
)
