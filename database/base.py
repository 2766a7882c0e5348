# database/base.py
# 1) Base/metadata 는 models.base 의 것을 재사용
from models.base import Base, metadata  # noqa: F401  여기서 declarative_base() 다시 만들지 말기

# 2) 모델 모듈 import 해서 Base.metadata 에 테이블 등록 (relationship 문자열 참조 해석용)
import models.account.user  # noqa: F401
import models.marketing.client  # noqa: F401
import models.marketing.campaign  # noqa: F401
import models.marketing.budget  # noqa: F401
import models.marketing.result  # noqa: F401
import models.marketing.team  # noqa: F401
