from __future__ import annotations

from collections.abc import Callable, Generator
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from conciliacao_fiscal.api.app import create_app
from conciliacao_fiscal.db.base import Base, import_orm_models
from conciliacao_fiscal.db.models.acordo import (
    Acordo,
    AcordoDetalhe,
    AcordoHonorarios,
    AcordoStatus,
    AcordoTransacao,
    DetalheStatus,
    TipoDetalhe,
)
from conciliacao_fiscal.db.models.contribuinte import Contribuinte
from conciliacao_fiscal.db.models.parcela import Parcela, ParcelaStatus, TipoParcela
from conciliacao_fiscal.db.models.processo import Processo, ProcessoStatus, TipoProcesso
from conciliacao_fiscal.db.session import get_db_session

ADMIN_HEADERS = {"X-User-Id": "admin-1", "X-User-Role": "ADMIN"}
FUNCIONARIO_HEADERS = {"X-User-Id": "func-1", "X-User-Role": "FUNCIONARIO"}
VISUALIZADOR_HEADERS = {"X-User-Id": "visu-1", "X-User-Role": "VISUALIZADOR"}


@dataclass(frozen=True)
class SeededAcordo:
    processo_id: UUID
    acordo_id: UUID
    parcela_ids: list[UUID]
    detalhe_ids: list[UUID]


SeedAcordo = Callable[..., SeededAcordo]


@pytest.fixture
def sqlite_session_factory() -> Generator[sessionmaker[Session], None, None]:
    import_orm_models()
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(
        bind=engine,
        class_=Session,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )
    try:
        yield factory
    finally:
        Base.metadata.drop_all(engine)


@pytest.fixture
def client(
    sqlite_session_factory: sessionmaker[Session],
) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_get_db_session() -> Generator[Session, None, None]:
        with sqlite_session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def seed_acordo(sqlite_session_factory: sessionmaker[Session]) -> SeedAcordo:
    """Insert a case with an agreement and regular installments."""

    counter = {"value": 0}

    def _seed(
        *,
        valores: tuple[str, ...] = ("1000.00", "500.00"),
        vencimentos: tuple[date, ...] | None = None,
        tipo: TipoProcesso = TipoProcesso.TRANSACAO_EXCEPCIONAL,
        acordo_status: AcordoStatus = AcordoStatus.ATIVO,
        processo_status: ProcessoStatus = ProcessoStatus.EM_CUMPRIMENTO,
        custas_advocaticias: str | None = None,
        honorarios_valor: str | None = None,
        detalhes: int = 0,
    ) -> SeededAcordo:
        counter["value"] += 1
        sequence = counter["value"]
        due_dates = vencimentos or tuple(
            date(2030, month, 10) for month in range(1, len(valores) + 1)
        )
        valor_final = sum((Decimal(valor) for valor in valores), Decimal("0.00"))
        with sqlite_session_factory() as session:
            contribuinte = Contribuinte(
                nome=f"Contribuinte {sequence}",
                documento=f"1234567800{sequence:03d}",
            )
            session.add(contribuinte)
            session.flush()
            processo = Processo(
                numero=f"PAF-{sequence:04d}/2026",
                tipo=tipo,
                status=processo_status,
                valor_original=valor_final,
                contribuinte_id=contribuinte.id,
            )
            session.add(processo)
            session.flush()
            acordo = Acordo(
                processo_id=processo.id,
                numero_termo=f"{sequence:04d}/2026",
                valor_total=valor_final,
                valor_desconto=Decimal("0.00"),
                valor_entrada=Decimal("0.00"),
                valor_final=valor_final,
                numero_parcelas=len(valores),
                data_assinatura=date(2026, 1, 5),
                data_vencimento=due_dates[0],
                status=acordo_status,
            )
            session.add(acordo)
            session.flush()
            parcelas = [
                Parcela(
                    acordo_id=acordo.id,
                    tipo_parcela=TipoParcela.PARCELA_ACORDO,
                    numero=numero,
                    valor=Decimal(valor),
                    status=ParcelaStatus.PENDENTE,
                    data_vencimento=due_date,
                )
                for numero, (valor, due_date) in enumerate(
                    zip(valores, due_dates, strict=True), start=1
                )
            ]
            session.add_all(parcelas)
            if tipo == TipoProcesso.TRANSACAO_EXCEPCIONAL:
                session.add(
                    AcordoTransacao(
                        acordo_id=acordo.id,
                        custas_advocaticias=(
                            Decimal(custas_advocaticias)
                            if custas_advocaticias is not None
                            else None
                        ),
                        honorarios_valor=(
                            Decimal(honorarios_valor)
                            if honorarios_valor is not None
                            else None
                        ),
                    )
                )
            elif honorarios_valor is not None:
                session.add(
                    AcordoHonorarios(
                        acordo_id=acordo.id,
                        honorarios_valor=Decimal(honorarios_valor),
                        honorarios_data_vencimento=date(2026, 6, 10),
                    )
                )
            detalhe_rows = [
                AcordoDetalhe(
                    acordo_id=acordo.id,
                    tipo=TipoDetalhe.IMOVEL,
                    descricao=f"Imóvel {index}",
                    valor=Decimal("100.00"),
                    status=DetalheStatus.PENDENTE,
                )
                for index in range(1, detalhes + 1)
            ]
            session.add_all(detalhe_rows)
            session.commit()
            return SeededAcordo(
                processo_id=processo.id,
                acordo_id=acordo.id,
                parcela_ids=[parcela.id for parcela in parcelas],
                detalhe_ids=[detalhe.id for detalhe in detalhe_rows],
            )

    return _seed


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return dict(ADMIN_HEADERS)


@pytest.fixture
def funcionario_headers() -> dict[str, str]:
    return dict(FUNCIONARIO_HEADERS)


@pytest.fixture
def visualizador_headers() -> dict[str, str]:
    return dict(VISUALIZADOR_HEADERS)
