"""Built-in waste knowledge base."""

from wastesort.models import WasteCategory as C
from wastesort.models import WasteRecord


def _r(name: str, category: C, note: str = "") -> WasteRecord:
    return WasteRecord(name=name, category=category, note=note)


WASTE_DATABASE: tuple[WasteRecord, ...] = (
    # Plastics and beverage cartons
    _r("PET láhev", C.PLAST, "Sešlápnout a zavíčkovat."),
    _r("PET flaška", C.PLAST, "Sešlápnout a zavíčkovat."),
    _r("plastová láhev", C.PLAST),
    _r("kelímek od jogurtu", C.PLAST, "Stačí vyprázdnit, nemusí se mýt."),
    _r("igelitová taška", C.PLAST),
    _r("mikrotenový sáček", C.PLAST),
    _r("polystyren", C.PLAST, "Jen čistý obalový polystyren."),
    _r("plastová fólie", C.PLAST),
    _r("karton od mléka", C.PLAST, "Nápojové kartony patří do plastů."),
    _r("tetrapak", C.PLAST, "Nápojové kartony patří do plastů."),
    _r("obal od šamponu", C.PLAST),
    # Paper
    _r("noviny", C.PAPIR),
    _r("časopis", C.PAPIR),
    _r("papírová krabice", C.PAPIR, "Rozložit, aby zabírala méně místa."),
    _r("kartonová krabice", C.PAPIR, "Rozložit, aby zabírala méně místa."),
    _r("sešit", C.PAPIR),
    _r("papírový sáček", C.PAPIR),
    _r("pizza krabice", C.SMESNY, "Mastný papír do papíru nepatří."),
    _r("účtenka", C.SMESNY, "Termopapír nepatří do papíru."),
    # Glass
    _r("sklenice", C.SKLO),
    _r("skleněná láhev", C.SKLO, "Bez víček."),
    _r("zavařovačka", C.SKLO),
    _r("zrcadlo", C.SBERNY_DVUR),
    _r("žárovka", C.SBERNY_DVUR),
    # Metal
    _r("plechovka", C.KOVY),
    _r("hliníková fólie", C.KOVY),
    _r("kovové víčko", C.KOVY),
    # Bio waste
    _r("slupky od ovoce", C.BIO),
    _r("kávová sedlina", C.BIO),
    _r("čajový sáček", C.BIO),
    _r("tráva", C.BIO),
    _r("listí", C.BIO),
    # Mixed
    _r("plenka", C.SMESNY),
    _r("cigaretový nedopalek", C.SMESNY),
    _r("vysavačový sáček", C.SMESNY),
    _r("hygienické kapesníky", C.SMESNY),
    # Collection yard
    _r("baterie", C.SBERNY_DVUR, "Také do sběrných boxů v obchodech."),
    _r("mobilní telefon", C.SBERNY_DVUR),
    _r("lednička", C.SBERNY_DVUR),
    _r("televize", C.SBERNY_DVUR),
    _r("barva", C.SBERNY_DVUR, "Nebezpečný odpad."),
    _r("pneumatika", C.SBERNY_DVUR),
    # Special containers
    _r("jedlý olej", C.OLEJE, "V uzavřené PET láhvi."),
    _r("oblečení", C.TEXTIL, "Čisté a zabalené v pytli."),
    _r("boty", C.TEXTIL, "Svázané po párech."),
    _r("léky", C.LEKARNA),
    _r("teploměr", C.LEKARNA, "Rtuťové teploměry vracejte do lékárny."),
)
