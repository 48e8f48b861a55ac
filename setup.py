from setuptools import setup, find_packages

setup(
    name='image_position_finder',
    version='0.1.0',
    description='Two-phase approximate template matcher for locating images inside images',
    author='Widedot Tools Team',
    packages=find_packages(include=['position_finder', 'position_finder.*']),
    install_requires=[
        'numpy',
        'pillow',
        'opencv-python',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'position-finder=position_finder.cli:main',
            'position-rectangles=position_finder.cli:rectangles_main',
        ],
    },
    python_requires='>=3.8',
)
