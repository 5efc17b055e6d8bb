from setuptools import setup, find_packages

setup(
    name='memsim',
    version='0.1',
    packages=find_packages(exclude=['tests*']),
    license='MIT',
    description='First-fit contiguous memory allocation simulator driven by REQUEST/RELEASE traces',
    python_requires='>=3.8',
    install_requires=['numpy'],
    extras_require={'test': ['pytest']},
    entry_points={'console_scripts': ['memsim=memsim.__main__:main']},
)
