from setuptools import setup, find_packages

setup(
    name="leavenow",
    version="0.1.0",
    description="Travel time, route choice and leave-now reminders for your next calendar event.",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "requests",
        "pytz",
        "python-dotenv"
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.7',
)
