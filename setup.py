#!/usr/bin/python
from setuptools import setup, find_packages

setup(
      name='pymssh',
      version='1.0.0',
      description='Run one command or upload one file on many hosts over SSH',
      author='pymssh developers',
      license='MIT',
      # 要打包的项目文件夹
      packages=find_packages(include=["pymssh", "pymssh.*"]),
      include_package_data=True,
      zip_safe=False,
      # 安装依赖的其他包
      install_requires=[
        "paramiko>=3.2,<5",
        "PyYAML",
        "click",
        "Jinja2",
        "marshmallow-dataclass",
        "tenacity",
        "rich",
      ],
      extras_require={
        "test": ["pytest"],
      },
    # 设置程序的入口
    # mssh 与 mscp 指向同一个入口, 按程序名区分
    entry_points={
        'console_scripts': [
            'mssh = pymssh.cli:main',
            'mscp = pymssh.cli:main',
            'pymssh = pymssh.cli:cli',
        ]
    },
    python_requires='>=3.8'
)
