"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- transactions: 거래 생성/수정/삭제/조회
- accounts: 계정 목록, 잔액, 리포트
- currencies: 등록 통화
"""
