"""
The migration package catalogue: one descriptor per entity type.

DESCRIPTORS is listed in dependency order, which is the processing order of
both export and import: masters, then transactional headers with their
lines and events, then accounting. Column headers are the historic package
headers of the application and must not change, or older packages would no
longer import.
"""

from typing import Dict

from sqlalchemy.orm import Session

from src.models import (
    Account,
    Agent,
    ArchivedDocument,
    Article,
    ArticlePrice,
    Client,
    Contract,
    Document,
    DocumentLine,
    DocumentLink,
    JournalEntry,
    LedgerPosting,
    Order,
    OrderLine,
    PriceList,
    ServiceIntervention,
    ServiceTicket,
    StockMovement,
    Supplier,
    VatRegisterEntry,
    Warehouse,
    WorkSite,
    WorkSiteIntervention,
)
from src.services.logging_utils import get_service_logger
from src.utils.datetime_utils import local_today
from .descriptors import EntityCategory, EntityDescriptor, Field, Reference, Requirement
from .key_directory import KeyDirectory
from .values import BOOLEAN, DATE, DECIMAL, INTEGER

logger = get_service_logger(__name__)

MANDATORY = Requirement.MANDATORY
ANCHOR = Requirement.ANCHOR


# ============================================================================
# Stage hooks
# ============================================================================


def ensure_main_warehouse(session: Session) -> None:
    """Mark the lowest-ID warehouse as main when none is."""
    if session.query(Warehouse).filter(Warehouse.is_main.is_(True)).first() is not None:
        return
    first = session.query(Warehouse).order_by(Warehouse.id).first()
    if first is None:
        return
    first.is_main = True
    logger.info(f"Warehouse '{first.code}' marked as main warehouse")


# ============================================================================
# Masters
# ============================================================================

AGENTS = EntityDescriptor(
    entity_type="Agent",
    file_name="01_agenti.csv",
    model=Agent,
    category=EntityCategory.MASTER,
    columns=(
        Field("Codice", "code", is_key=True),
        Field("Nome", "first_name"),
        Field("Cognome", "last_name"),
        Field("Telefono", "phone"),
        Field("Cellulare", "mobile"),
        Field("Email", "email"),
        Field("PercentualeProvvigione", "commission_percent", DECIMAL),
        Field("Attivo", "is_active", BOOLEAN),
        Field("Note", "notes"),
    ),
)

PRICE_LISTS = EntityDescriptor(
    entity_type="PriceList",
    file_name="02_listini.csv",
    model=PriceList,
    category=EntityCategory.MASTER,
    columns=(
        Field("Codice", "code", is_key=True),
        Field("Descrizione", "description"),
        Field("DataInizioValidita", "valid_from", DATE),
        Field("DataFineValidita", "valid_to", DATE),
        Field("Attivo", "is_active", BOOLEAN),
        Field("Note", "notes"),
    ),
)

WAREHOUSES = EntityDescriptor(
    entity_type="Warehouse",
    file_name="03_magazzini.csv",
    model=Warehouse,
    category=EntityCategory.MASTER,
    columns=(
        Field("Codice", "code", is_key=True),
        Field("Descrizione", "description"),
        Field("Indirizzo", "address"),
        Field("Citta", "city"),
        Field("CAP", "postal_code"),
        Field("Telefono", "phone"),
        Field("Principale", "is_main", BOOLEAN),
        Field("Attivo", "is_active", BOOLEAN),
        Field("Note", "notes"),
    ),
    after_stage=ensure_main_warehouse,
)

SUPPLIERS = EntityDescriptor(
    entity_type="Supplier",
    file_name="04_fornitori.csv",
    model=Supplier,
    category=EntityCategory.MASTER,
    columns=(
        Field("Codice", "code", is_key=True),
        Field("RagioneSociale", "company_name", requirement=MANDATORY),
        Field("CodiceFiscale", "tax_code"),
        Field("PartitaIVA", "vat_number", aliases=("PIVA",)),
        Field("Indirizzo", "address"),
        Field("CAP", "postal_code"),
        Field("Citta", "city"),
        Field("Provincia", "province"),
        Field("Nazione", "country"),
        Field("Telefono", "phone"),
        Field("Email", "email"),
        Field("PEC", "pec"),
        Field("CodiceSDI", "sdi_code"),
        Field("GiorniPagamento", "payment_days", INTEGER),
        Field("Banca", "bank"),
        Field("IBAN", "iban"),
        Field("ValutazioneQualita", "quality_rating", DECIMAL),
        Field("DataUltimaValutazione", "last_rating_date", DATE),
        Field("Attivo", "is_active", BOOLEAN),
        Field("Note", "notes"),
    ),
)

ARTICLES = EntityDescriptor(
    entity_type="Article",
    file_name="05_articoli.csv",
    model=Article,
    category=EntityCategory.MASTER,
    columns=(
        Field("Codice", "code", is_key=True),
        Field("Descrizione", "description", requirement=MANDATORY),
        Field("DescrizioneEstesa", "extended_description"),
        Field("CodiceEAN", "ean_code", aliases=("EAN",)),
        Field("CodiceFornitori", "supplier_codes"),
        Field("UnitaMisura", "unit_of_measure"),
        Field("PrezzoAcquisto", "purchase_price", DECIMAL),
        Field("PrezzoVendita", "sale_price", DECIMAL),
        Field("AliquotaIVA", "vat_rate", DECIMAL),
        Field("ScortaMinima", "min_stock", DECIMAL),
        Field("GestioneTaglie", "tracks_sizes", BOOLEAN),
        Field("GestioneColori", "tracks_colors", BOOLEAN),
        Field("GestioneNumeriSerie", "tracks_serials", BOOLEAN),
        Field("GestioneLotti", "tracks_lots", BOOLEAN),
        Field("ArticoloDiServizio", "is_service", BOOLEAN),
        Field("Attivo", "is_active", BOOLEAN),
        Field("Categoria", "category"),
        Field("Sottocategoria", "subcategory"),
        Field("Marca", "brand"),
        Field("Peso", "weight", DECIMAL),
        Field("Volume", "volume", DECIMAL),
        Field("Note", "notes"),
        Reference("FornitorePredefinitoCodice", "default_supplier_id", "Supplier"),
    ),
)

CLIENTS = EntityDescriptor(
    entity_type="Client",
    file_name="06_clienti.csv",
    model=Client,
    category=EntityCategory.MASTER,
    columns=(
        Field("Codice", "code", is_key=True),
        Field("RagioneSociale", "company_name", requirement=MANDATORY),
        Field("Nome", "first_name"),
        Field("Cognome", "last_name"),
        Field("CodiceFiscale", "tax_code"),
        Field("PartitaIVA", "vat_number", aliases=("PIVA",)),
        Field("Indirizzo", "address"),
        Field("CAP", "postal_code"),
        Field("Citta", "city"),
        Field("Provincia", "province"),
        Field("Nazione", "country"),
        Field("Telefono", "phone"),
        Field("Cellulare", "mobile"),
        Field("Email", "email"),
        Field("PEC", "pec"),
        Field("CodiceSDI", "sdi_code"),
        Field("FidoMassimo", "credit_limit", DECIMAL),
        Field("GiorniPagamento", "payment_days", INTEGER),
        Field("Banca", "bank"),
        Field("IBAN", "iban"),
        Field("Attivo", "is_active", BOOLEAN),
        Field("Note", "notes"),
        Reference("AgenteCodice", "agent_id", "Agent"),
        Reference("ListinoCodice", "price_list_id", "PriceList"),
    ),
)

ARTICLE_PRICES = EntityDescriptor(
    entity_type="ArticlePrice",
    file_name="07_articoli_listino.csv",
    model=ArticlePrice,
    category=EntityCategory.LINK,
    columns=(
        Reference("ListinoCodice", "price_list_id", "PriceList", MANDATORY),
        Reference("ArticoloCodice", "article_id", "Article", MANDATORY),
        Field("Prezzo", "price", DECIMAL),
        Field("ScontoPercentuale", "discount_percent", DECIMAL),
        Field("DataInizioValidita", "valid_from", DATE, default=local_today),
        Field("DataFineValidita", "valid_to", DATE),
    ),
    fingerprint=("price_list_id", "article_id", "valid_from"),
)


# ============================================================================
# Contracts, work sites, service tickets
# ============================================================================

CONTRACTS = EntityDescriptor(
    entity_type="Contract",
    file_name="10_contratti.csv",
    model=Contract,
    category=EntityCategory.HEADER,
    columns=(
        Field("NumeroContratto", "number", is_key=True),
        Reference("ClienteCodice", "client_id", "Client", MANDATORY),
        Field("Descrizione", "description"),
        Field("DataInizio", "start_date", DATE),
        Field("DataFine", "end_date", DATE),
        Field("Importo", "amount", DECIMAL),
        Field("MonteOreAcquistato", "hours_purchased", INTEGER),
        Field("MonteOreResiduo", "hours_remaining", INTEGER),
        Field("CostoOrarioExtra", "extra_hourly_cost", DECIMAL),
        Field("TipoContratto", "contract_type"),
        Field("StatoContratto", "status"),
        Field("FrequenzaFatturazione", "billing_frequency"),
        Field("ProssimaFatturazione", "next_billing_date", DATE),
        Field("Note", "notes"),
    ),
)

WORK_SITES = EntityDescriptor(
    entity_type="WorkSite",
    file_name="11_cantieri.csv",
    model=WorkSite,
    category=EntityCategory.HEADER,
    columns=(
        Field("CodiceCantiere", "code", is_key=True),
        Reference("ClienteCodice", "client_id", "Client", MANDATORY),
        Field("Descrizione", "description"),
        Field("Indirizzo", "address"),
        Field("Citta", "city"),
        Field("DataInizio", "start_date", DATE),
        Field("DataFine", "end_date", DATE),
        Field("ImportoPreventivato", "budget_amount", DECIMAL),
        Field("CostiSostenuti", "costs_incurred", DECIMAL),
        Field("RicaviMaturati", "revenue_accrued", DECIMAL),
        Field("StatoCantiere", "status"),
        Field("ResponsabileCantiere", "manager"),
        Field("Note", "notes"),
    ),
)

WORK_SITE_INTERVENTIONS = EntityDescriptor(
    entity_type="WorkSiteIntervention",
    file_name="12_cantieri_interventi.csv",
    model=WorkSiteIntervention,
    category=EntityCategory.EVENT,
    columns=(
        Reference("CantiereCodice", "work_site_id", "WorkSite", ANCHOR),
        Field("DataIntervento", "intervention_date", DATE, requirement=MANDATORY),
        Field("Operai", "workers"),
        Field("NumeroOperai", "worker_count", INTEGER),
        Field("OreManodopera", "labour_hours", INTEGER),
        Field("CostoManodopera", "labour_cost", DECIMAL),
        Field("CostoMateriali", "material_cost", DECIMAL),
        Field("TotaleCosto", "total_cost", DECIMAL),
        Field("Descrizione", "description"),
        Field("Note", "notes"),
    ),
    fingerprint=(
        "work_site_id",
        "intervention_date",
        "description",
        "workers",
        "labour_hours",
        "total_cost",
    ),
)

SERVICE_TICKETS = EntityDescriptor(
    entity_type="ServiceTicket",
    file_name="13_schede_assistenza.csv",
    model=ServiceTicket,
    category=EntityCategory.HEADER,
    columns=(
        Field("NumeroScheda", "number", is_key=True),
        Field("DataApertura", "opened_on", DATE),
        Field("DataChiusura", "closed_on", DATE),
        Reference("ClienteCodice", "client_id", "Client", MANDATORY),
        Field("DescrizioneProdotto", "product_description"),
        Field("Matricola", "serial_number"),
        Field("Modello", "model"),
        Field("DifettoDichiarato", "reported_fault"),
        Field("DifettoRiscontrato", "found_fault"),
        Field("InGaranzia", "under_warranty", BOOLEAN),
        Field("StatoLavorazione", "status"),
        Field("TecnicoAssegnato", "assigned_technician"),
        Field("CostoLavorazione", "labour_cost", DECIMAL),
        Field("CostoMateriali", "material_cost", DECIMAL),
        Field("TotaleIntervento", "total_amount", DECIMAL),
        # Documents come later in the package
        Reference(
            "DocumentoCaricoKey",
            "intake_document_id",
            "Document",
            deferred=True,
            resolve_after="Document",
        ),
        Reference(
            "DocumentoScaricoKey",
            "delivery_document_id",
            "Document",
            deferred=True,
            resolve_after="Document",
        ),
        Field("Note", "notes"),
    ),
)

SERVICE_INTERVENTIONS = EntityDescriptor(
    entity_type="ServiceIntervention",
    file_name="14_assistenza_interventi.csv",
    model=ServiceIntervention,
    category=EntityCategory.EVENT,
    columns=(
        Reference("NumeroScheda", "service_ticket_id", "ServiceTicket", ANCHOR),
        Field("DataIntervento", "intervention_date", DATE, requirement=MANDATORY),
        Field("Tecnico", "technician"),
        Field("DescrizioneIntervento", "description"),
        Field("MinutiLavorazione", "minutes_worked", INTEGER),
        Field("CostoOrario", "hourly_rate", DECIMAL),
        Field("TotaleLavorazione", "labour_total", DECIMAL),
        Field("Note", "notes"),
    ),
    fingerprint=(
        "service_ticket_id",
        "intervention_date",
        "technician",
        "description",
        "labour_total",
    ),
)


# ============================================================================
# Orders and documents
# ============================================================================

ORDERS = EntityDescriptor(
    entity_type="Order",
    file_name="20_ordini.csv",
    model=Order,
    category=EntityCategory.HEADER,
    columns=(
        Field("TipoOrdine", "order_type", is_key=True),
        Field("NumeroOrdine", "number", is_key=True),
        Field("DataOrdine", "order_date", DATE),
        Field("DataConsegnaPrevista", "expected_delivery_date", DATE),
        Reference("ClienteCodice", "client_id", "Client"),
        Reference("FornitoreCodice", "supplier_id", "Supplier"),
        Field("Imponibile", "taxable_amount", DECIMAL),
        Field("IVA", "vat_amount", DECIMAL),
        Field("Totale", "total", DECIMAL),
        Field("StatoOrdine", "status"),
        Field("RiferimentoCliente", "customer_reference"),
        Field("Note", "notes"),
    ),
)

ORDER_LINES = EntityDescriptor(
    entity_type="OrderLine",
    file_name="21_ordini_righe.csv",
    model=OrderLine,
    category=EntityCategory.LINE,
    columns=(
        Reference("OrdineKey", "order_id", "Order", ANCHOR, is_key=True),
        Field("NumeroRiga", "line_number", INTEGER, is_key=True),
        Reference("ArticoloCodice", "article_id", "Article"),
        Field("Descrizione", "description"),
        Field("QuantitaOrdinata", "quantity_ordered", DECIMAL),
        Field("QuantitaEvasa", "quantity_delivered", DECIMAL),
        Field("UnitaMisura", "unit_of_measure"),
        Field("PrezzoUnitario", "unit_price", DECIMAL),
        Field("Sconto", "discount", DECIMAL),
        Field("AliquotaIVA", "vat_rate", DECIMAL),
        Field("Totale", "total", DECIMAL),
        Field("Note", "notes"),
    ),
    fingerprint=(
        "order_id",
        "line_number",
        "description",
        "quantity_ordered",
        "unit_price",
        "total",
    ),
)

DOCUMENTS = EntityDescriptor(
    entity_type="Document",
    file_name="30_documenti.csv",
    model=Document,
    category=EntityCategory.HEADER,
    columns=(
        Field("TipoDocumento", "document_type", is_key=True),
        Field("NumeroDocumento", "number", is_key=True),
        Field("DataDocumento", "document_date", DATE),
        Reference("ClienteCodice", "client_id", "Client"),
        Reference("FornitoreCodice", "supplier_id", "Supplier"),
        Field("RagioneSocialeDestinatario", "recipient_name"),
        Field("IndirizzoDestinatario", "recipient_address"),
        Field("Imponibile", "taxable_amount", DECIMAL),
        Field("IVA", "vat_amount", DECIMAL),
        Field("Totale", "total", DECIMAL),
        Field("ScontoGlobale", "global_discount", DECIMAL),
        Field("SpeseAccessorie", "extra_charges", DECIMAL),
        Field("ModalitaPagamento", "payment_method"),
        Field("BancaAppoggio", "bank"),
        Field("DataScadenzaPagamento", "payment_due_date", DATE),
        Field("Pagato", "is_paid", BOOLEAN),
        Field("DataPagamento", "payment_date", DATE),
        Field("PartitaIVADestinatario", "recipient_vat_number"),
        Field("CodiceFiscaleDestinatario", "recipient_tax_code"),
        Field("CodiceSDI", "sdi_code"),
        Field("PECDestinatario", "recipient_pec"),
        Field("FatturaElettronica", "is_electronic_invoice", BOOLEAN),
        Field("NomeFileXML", "xml_file_name"),
        Field("XMLInviato", "xml_sent", BOOLEAN),
        Field("DataInvioXML", "xml_sent_date", DATE),
        Field("IdentificativoSDI", "sdi_identifier"),
        Field("StatoFatturaElettronica", "e_invoice_status"),
        Reference("DocumentoOriginaleKey", "origin_document_id", "Document", deferred=True),
        Reference("MagazzinoCodice", "warehouse_id", "Warehouse"),
        Field("CausaleDocumento", "reason"),
        Field("AspettoBeni", "goods_appearance"),
        Field("TrasportoCura", "transport_by"),
        Field("Vettore", "carrier"),
        Field("NumeroColli", "package_count", INTEGER),
        Field("Peso", "weight", DECIMAL),
        Field("ReverseCharge", "reverse_charge", BOOLEAN),
        Field("SplitPayment", "split_payment", BOOLEAN),
        Field("Note", "notes"),
        Field("UtenteCreazione", "created_by"),
    ),
)

DOCUMENT_LINES = EntityDescriptor(
    entity_type="DocumentLine",
    file_name="31_documenti_righe.csv",
    model=DocumentLine,
    category=EntityCategory.LINE,
    columns=(
        Reference("DocumentoKey", "document_id", "Document", ANCHOR, is_key=True),
        Field("NumeroRiga", "line_number", INTEGER, is_key=True),
        Reference("ArticoloCodice", "article_id", "Article"),
        Field("Descrizione", "description"),
        Field("Quantita", "quantity", DECIMAL),
        Field("UnitaMisura", "unit_of_measure"),
        Field("PrezzoUnitario", "unit_price", DECIMAL),
        Field("Sconto1", "discount1", DECIMAL),
        Field("Sconto2", "discount2", DECIMAL),
        Field("Sconto3", "discount3", DECIMAL),
        Field("PrezzoNetto", "net_price", DECIMAL),
        Field("AliquotaIVA", "vat_rate", DECIMAL),
        Field("Imponibile", "taxable_amount", DECIMAL),
        Field("ImportoIVA", "vat_amount", DECIMAL),
        Field("Totale", "total", DECIMAL),
        Field("NumeroSerie", "serial_number"),
        Field("Lotto", "lot"),
        Field("RigaDescrittiva", "is_description_only", BOOLEAN),
        Field("Note", "notes"),
    ),
    fingerprint=(
        "document_id",
        "line_number",
        "description",
        "quantity",
        "unit_price",
        "total",
    ),
)

DOCUMENT_LINKS = EntityDescriptor(
    entity_type="DocumentLink",
    file_name="32_documenti_collegamenti.csv",
    model=DocumentLink,
    category=EntityCategory.LINK,
    columns=(
        Reference("DocumentoKey", "document_id", "Document", MANDATORY),
        Reference("DocumentoOrigineKey", "origin_document_id", "Document", MANDATORY),
    ),
    fingerprint=("document_id", "origin_document_id"),
)

STOCK_MOVEMENTS = EntityDescriptor(
    entity_type="StockMovement",
    file_name="33_movimenti_magazzino.csv",
    model=StockMovement,
    category=EntityCategory.EVENT,
    columns=(
        Field("TipoMovimento", "movement_type", requirement=ANCHOR),
        Field("DataMovimento", "movement_date", DATE, requirement=MANDATORY),
        Reference("ArticoloCodice", "article_id", "Article", MANDATORY),
        Reference("MagazzinoCodice", "warehouse_id", "Warehouse", MANDATORY),
        Field("Quantita", "quantity", DECIMAL),
        Field("CostoUnitario", "unit_cost", DECIMAL),
        Field("NumeroDocumento", "document_number"),
        Reference("DocumentoKey", "document_id", "Document"),
        Reference(
            "DocumentoRigaNumero",
            "document_line_id",
            "DocumentLine",
            scope_header="DocumentoKey",
        ),
        Field("NumeroSerie", "serial_number"),
        Field("Lotto", "lot"),
        Field("DataScadenza", "expiry_date", DATE),
        Field("Causale", "reason"),
        Field("Note", "notes"),
        Field("UtenteCreazione", "created_by"),
    ),
    fingerprint=(
        "movement_type",
        "movement_date",
        "article_id",
        "warehouse_id",
        "quantity",
        "unit_cost",
        "document_number",
        "serial_number",
        "lot",
    ),
)

ARCHIVED_DOCUMENTS = EntityDescriptor(
    entity_type="ArchivedDocument",
    file_name="34_documenti_archivio.csv",
    model=ArchivedDocument,
    category=EntityCategory.HEADER,
    columns=(
        Field("NumeroProtocollo", "protocol_number", is_key=True),
        Field("DataProtocollo", "protocol_date", DATE),
        Field("TitoloDocumento", "title", requirement=MANDATORY),
        Field("CategoriaDocumento", "category"),
        Field("Descrizione", "description"),
        Field("PercorsoFile", "file_path", requirement=MANDATORY),
        Field("EstensioneFile", "file_extension"),
        Field("DimensioneFile", "file_size", INTEGER),
        Reference("ClienteCodice", "client_id", "Client"),
        Reference("FornitoreCodice", "supplier_id", "Supplier"),
        Reference("ArticoloCodice", "article_id", "Article"),
        Field("StatoDocumento", "status"),
        Field("DataApertura", "opened_on", DATE),
        Field("DataChiusura", "closed_on", DATE),
        Field("Tags", "tags"),
        Field("Note", "notes"),
    ),
)


# ============================================================================
# Accounting
# ============================================================================

ACCOUNTS = EntityDescriptor(
    entity_type="Account",
    file_name="40_piano_dei_conti.csv",
    model=Account,
    category=EntityCategory.MASTER,
    columns=(
        Field("Codice", "code", is_key=True),
        Field("Descrizione", "description", requirement=MANDATORY),
        Field("TipoConto", "account_type"),
        Reference("ContoSuperioreCodice", "parent_id", "Account", deferred=True),
        Field("Livello", "level", INTEGER),
        Field("ContoFoglia", "is_leaf", BOOLEAN),
        Field("Attivo", "is_active", BOOLEAN),
        Field("Note", "notes"),
    ),
)

JOURNAL_ENTRIES = EntityDescriptor(
    entity_type="JournalEntry",
    file_name="41_registrazioni_contabili.csv",
    model=JournalEntry,
    category=EntityCategory.HEADER,
    columns=(
        Field("NumeroRegistrazione", "number", is_key=True),
        Field("DataRegistrazione", "entry_date", DATE),
        Field("CausaleContabile", "reason"),
        Field("Descrizione", "description"),
        Reference("DocumentoKey", "document_id", "Document"),
        Field("TotaleDare", "total_debit", DECIMAL),
        Field("TotaleAvere", "total_credit", DECIMAL),
        Field("UtenteCreazione", "created_by"),
    ),
)

LEDGER_POSTINGS = EntityDescriptor(
    entity_type="LedgerPosting",
    file_name="42_movimenti_contabili.csv",
    model=LedgerPosting,
    category=EntityCategory.EVENT,
    columns=(
        Reference("NumeroRegistrazione", "journal_entry_id", "JournalEntry", MANDATORY),
        Reference("ContoCodice", "account_id", "Account", MANDATORY),
        Field("ImportoDare", "debit", DECIMAL),
        Field("ImportoAvere", "credit", DECIMAL),
        Field("Descrizione", "description"),
    ),
    fingerprint=("journal_entry_id", "account_id", "debit", "credit", "description"),
)

VAT_REGISTER = EntityDescriptor(
    entity_type="VatRegisterEntry",
    file_name="43_registri_iva.csv",
    model=VatRegisterEntry,
    category=EntityCategory.HEADER,
    columns=(
        Field("TipoRegistro", "register_type", is_key=True),
        Field("DataRegistrazione", "entry_date", DATE),
        Reference("DocumentoKey", "document_id", "Document", MANDATORY),
        Field("NumeroProtocollo", "protocol_number", is_key=True),
        Field("Imponibile", "taxable_amount", DECIMAL),
        Field("AliquotaIVA", "vat_rate", DECIMAL),
        Field("ImportoIVA", "vat_amount", DECIMAL),
        Field("IVADetraibile", "deductible_vat", DECIMAL),
        Field("IVAIndetraibile", "non_deductible_vat", DECIMAL),
        Field("EsigibilitaDifferita", "deferred_liability", BOOLEAN),
        Field("DataEsigibilita", "liability_date", DATE),
        Field("Descrizione", "description"),
    ),
)


# ============================================================================
# Processing order
# ============================================================================

DESCRIPTORS = (
    AGENTS,
    PRICE_LISTS,
    WAREHOUSES,
    SUPPLIERS,
    ARTICLES,
    CLIENTS,
    ARTICLE_PRICES,
    CONTRACTS,
    WORK_SITES,
    WORK_SITE_INTERVENTIONS,
    SERVICE_TICKETS,
    SERVICE_INTERVENTIONS,
    ORDERS,
    ORDER_LINES,
    DOCUMENTS,
    DOCUMENT_LINES,
    DOCUMENT_LINKS,
    STOCK_MOVEMENTS,
    ARCHIVED_DOCUMENTS,
    ACCOUNTS,
    JOURNAL_ENTRIES,
    LEDGER_POSTINGS,
    VAT_REGISTER,
)

DESCRIPTORS_BY_TYPE: Dict[str, EntityDescriptor] = {d.entity_type: d for d in DESCRIPTORS}

PACKAGE_FILES = tuple(d.file_name for d in DESCRIPTORS)


def get_descriptor(entity_type: str) -> EntityDescriptor:
    """Descriptor for an entity type. Raises KeyError for unknown types."""
    return DESCRIPTORS_BY_TYPE[entity_type]


def build_directory(session: Session) -> KeyDirectory:
    """Load the natural keys of every entity type, in dependency order."""
    directory = KeyDirectory()
    for descriptor in DESCRIPTORS:
        directory.refresh(session, descriptor)
    return directory
