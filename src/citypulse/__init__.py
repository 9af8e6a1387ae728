"""City Pulse - 도시 센서 지표 라이브 대시보드 엔진"""

__version__ = "0.1.0"
