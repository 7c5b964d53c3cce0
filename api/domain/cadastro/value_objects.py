# api/domain/cadastro/value_objects.py
from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

_DATA_URI = re.compile(r"^data:([A-Za-z0-9.+/-]+);base64,(.+)$", re.DOTALL)
_NAO_DIGITO_OU_VIRGULA = re.compile(r"[^\d,]")
_NAO_NUMERICO = re.compile(r"[^\d,.]")
_DECIMAL_COM_PONTO = re.compile(r"\d+\.\d{1,2}")
_ONZE_DIGITOS = re.compile(r"[0-9]{11}")


@dataclass(frozen=True)
class CPF:
    """Value Object imutavel para CPF. NUNCA expoe valor completo em repr/str (LGPD).

    Aceita o CPF com ou sem pontuacao. Digitos verificadores nao sao conferidos:
    o cadastro aceita o documento como informado pelo servidor.
    """
    _valor: str  # sempre 11 digitos

    def __init__(self, raw: str) -> None:
        digitos = "".join(c for c in raw if c in "0123456789")
        if len(digitos) != 11:
            raise ValueError(f"CPF invalido: comprimento {len(digitos)}, esperado 11")
        object.__setattr__(self, "_valor", digitos)

    @classmethod
    def de_digitos(cls, raw: str) -> CPF:
        """Exige exatamente 11 digitos ASCII, sem pontuacao (busca por CPF)."""
        if not _ONZE_DIGITOS.fullmatch(raw):
            raise ValueError("CPF deve conter exatamente 11 digitos numericos")
        return cls(raw)

    @property
    def valor(self) -> str:
        """11 digitos sem formatacao. Usar com cuidado, nunca logar."""
        return self._valor

    @property
    def formatado(self) -> str:
        """000.000.000-00, forma canonica gravada no banco."""
        d = self._valor
        return f"{d[:3]}.{d[3:6]}.{d[6:9]}-{d[9:]}"

    @property
    def mascarado(self) -> str:
        """***.XXX.XXX-**, formato seguro para logs."""
        d = self._valor
        return f"***.{d[3:6]}.{d[6:9]}-**"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CPF):
            return NotImplemented
        return self._valor == other._valor

    def __hash__(self) -> int:
        return hash(self._valor)

    def __repr__(self) -> str:
        return f"CPF({self.mascarado!r})"

    def __str__(self) -> str:
        return self.mascarado


def vazio_para_none(valor: object) -> object:
    """String vazia (ou so espacos) vira None. Demais valores passam intactos."""
    if isinstance(valor, str) and not valor.strip():
        return None
    return valor


def normalizar_salario(valor: object) -> Decimal | None:
    """'R$ 3.500,75' -> Decimal('3500.75'). Vazio vira None.

    Texto: remove tudo que nao for digito ou virgula e troca a virgula por ponto.
    Sem virgula, um ponto seguido de 1 ou 2 digitos e separador decimal
    ('3500.75', forma serializada pelo proprio JSON da API); '3.500' continua
    sendo milhar. Sinal de menos em texto e descartado como qualquer simbolo.
    Numeros (int/float/Decimal) sao convertidos diretamente.
    """
    if valor is None:
        return None
    if isinstance(valor, Decimal):
        return valor
    if isinstance(valor, (int, float)) and not isinstance(valor, bool):
        return Decimal(str(valor))
    texto = str(valor)
    com_ponto = _NAO_NUMERICO.sub("", texto)
    if _DECIMAL_COM_PONTO.fullmatch(com_ponto):
        return Decimal(com_ponto)
    limpo = _NAO_DIGITO_OU_VIRGULA.sub("", texto).replace(",", ".", 1)
    if not limpo:
        return None
    try:
        return Decimal(limpo)
    except InvalidOperation as err:
        raise ValueError(f"Salario base invalido: {valor!r}") from err


@dataclass(frozen=True)
class ConteudoDecodificado:
    mime: str | None  # None quando o conteudo veio como base64 puro
    dados: bytes


def payload_base64(conteudo: str) -> str:
    """Parte base64 do conteudo: tudo apos a primeira virgula, se houver."""
    return conteudo.split(",", 1)[1] if "," in conteudo else conteudo


def tamanho_decodificado(conteudo: str | None) -> float:
    """Estimativa do tamanho em bytes: comprimento do base64 * 3/4."""
    if not conteudo:
        return 0.0
    return len(payload_base64(conteudo)) * 3 / 4


def decodificar_conteudo(conteudo: str) -> ConteudoDecodificado:
    """Aceita data-URI (data:<mime>;base64,<payload>) ou base64 puro."""
    match = _DATA_URI.match(conteudo)
    mime, payload = (match.group(1), match.group(2)) if match else (None, conteudo)
    try:
        dados = base64.b64decode(payload)
    except (binascii.Error, ValueError) as err:
        raise ValueError("Conteudo do anexo nao e base64 valido") from err
    return ConteudoDecodificado(mime=mime, dados=dados)


def e_data_uri(conteudo: str) -> bool:
    return _DATA_URI.match(conteudo) is not None
